# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import pytest

from xsmanip.core.global_config import GlobalConfig
from xsmanip.hardware.bus import registry
from xsmanip.robot.core import RobotCore
from xsmanip.robot.errors import (
    InvalidGroupError,
    TransportUnavailableError,
    UnknownRobotModelError,
)


def test_unknown_model(mock_bus) -> None:
    with pytest.raises(UnknownRobotModelError) as exc_info:
        RobotCore("wx9000", init_node=False, transport=mock_bus)
    assert "wx200" in exc_info.value.available


def test_robot_name_defaults_to_model(mock_bus) -> None:
    core = RobotCore("wx200", init_node=False, transport=mock_bus)
    assert core.robot_name == "wx200"
    assert core.namespace == "/wx200"
    core.shutdown()


def test_unreachable_bus(bus_factory) -> None:
    with pytest.raises(TransportUnavailableError):
        RobotCore("wx200", init_node=False, transport=bus_factory(reachable=False))


def test_transport_built_from_global_config() -> None:
    config = GlobalConfig(transport="mock")
    core = RobotCore("vx300s", "left", init_node=False, global_config=config)
    assert core.transport.is_connected()
    assert core.read_group("arm") == [0.0] * 6
    core.shutdown()


def test_unknown_transport_name() -> None:
    with pytest.raises(TransportUnavailableError, match="canbus"):
        RobotCore("wx200", init_node=False, global_config=GlobalConfig(transport="canbus"))


def test_object_without_bus_interface_rejected() -> None:
    with pytest.raises(TransportUnavailableError, match="BusTransport"):
        RobotCore("wx200", init_node=False, transport=object())  # type: ignore[arg-type]


def test_init_node_runs_once(mock_bus, bus_factory, fresh_node) -> None:
    assert not registry.is_node_initialized()

    first = RobotCore("wx200", init_node=True, transport=mock_bus)
    assert registry.is_node_initialized()
    assert not registry.init_node()

    second = RobotCore("wx200", "other", init_node=True, transport=bus_factory())
    first.shutdown()
    second.shutdown()


def test_init_node_false_leaves_process_state_alone(mock_bus, fresh_node) -> None:
    core = RobotCore("wx200", init_node=False, transport=mock_bus)
    assert not registry.is_node_initialized()
    core.shutdown()


def test_group_joints(mock_bus) -> None:
    core = RobotCore("px100", init_node=False, transport=mock_bus)

    assert core.group_joints("arm") == ("waist", "shoulder", "elbow", "wrist_angle")
    assert core.group_joints("all")[-1] == "gripper"
    assert core.group_joints("elbow") == ("elbow",)
    with pytest.raises(InvalidGroupError):
        core.group_joints("turret")
    core.shutdown()


def test_shutdown_destroys_timers_and_disconnects(mock_bus, manual_scheduler) -> None:
    core = RobotCore("wx200", init_node=False, transport=mock_bus, scheduler=manual_scheduler)
    arm_task = core.timers.create("arm", "poll", 0.1, lambda: None)
    core.timers.create("gripper", "limits", 0.1, lambda: None)

    core.shutdown()
    core.shutdown()

    assert len(core.timers) == 0
    assert arm_task.is_destroyed
    assert not mock_bus.is_connected()
    assert core.is_shutdown
