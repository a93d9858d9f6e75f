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

from pydantic import ValidationError
import pytest

from xsmanip.robot.config import ManipulatorConfig, TimerCleanupPolicy


def test_defaults() -> None:
    config = ManipulatorConfig(robot_model="wx200")

    assert config.group_name == "arm"
    assert config.gripper_name == "gripper"
    assert config.moving_time == 2.0
    assert config.accel_time == 0.3
    assert config.gripper_pressure == 0.5
    assert config.gripper_pressure_lower_limit == 150
    assert config.gripper_pressure_upper_limit == 350
    assert config.init_node is True
    assert config.timer_cleanup is TimerCleanupPolicy.GRIPPER_GATED
    assert config.has_gripper


@pytest.mark.parametrize("robot_name", ["", None])
def test_unset_robot_name_resolves_to_model(robot_name) -> None:
    config = ManipulatorConfig(robot_model="vx300s", robot_name=robot_name)
    assert config.robot_name == "vx300s"


def test_missing_robot_name_resolves_to_model() -> None:
    assert ManipulatorConfig(robot_model="px100").robot_name == "px100"


def test_explicit_robot_name_kept_verbatim() -> None:
    config = ManipulatorConfig(robot_model="wx200", robot_name="arm1/wx200")
    assert config.robot_name == "arm1/wx200"


def test_empty_gripper_name_means_no_gripper() -> None:
    assert not ManipulatorConfig(robot_model="wx200", gripper_name="").has_gripper


def test_unknown_option_rejected() -> None:
    with pytest.raises(ValidationError, match="extra"):
        ManipulatorConfig(robot_model="wx200", moving_tme=1.0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"robot_model": ""},
        {"group_name": ""},
        {"moving_time": 0.0},
        {"accel_time": -0.1},
        {"gripper_pressure_lower_limit": -1},
        {"gripper_pressure_lower_limit": 400, "gripper_pressure_upper_limit": 300},
        {"gripper_pressure": float("nan")},
        {"gripper_pressure": float("inf")},
    ],
)
def test_invalid_values_rejected(overrides) -> None:
    params = {"robot_model": "wx200", **overrides}
    with pytest.raises(ValidationError):
        ManipulatorConfig(**params)


def test_pressure_outside_unit_range_is_accepted() -> None:
    # the gripper clamps it
    assert ManipulatorConfig(robot_model="wx200", gripper_pressure=1.5).gripper_pressure == 1.5


def test_init_node_accepts_numeric_flag() -> None:
    assert ManipulatorConfig(robot_model="wx200", init_node=0).init_node is False
    assert ManipulatorConfig(robot_model="wx200", init_node=1).init_node is True


def test_timer_cleanup_from_string() -> None:
    config = ManipulatorConfig(robot_model="wx200", timer_cleanup="all_groups")
    assert config.timer_cleanup is TimerCleanupPolicy.ALL_GROUPS


def test_config_is_frozen() -> None:
    config = ManipulatorConfig(robot_model="wx200")
    with pytest.raises(ValidationError):
        config.group_name = "other"  # type: ignore[misc]
