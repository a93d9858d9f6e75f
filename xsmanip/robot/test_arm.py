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

from xsmanip.robot.arm import ArmInterface, validate_motion_profile
from xsmanip.robot.core import RobotCore
from xsmanip.robot.errors import ConstructionError, InvalidGroupError, InvalidMotionProfileError


@pytest.fixture
def core(mock_bus, manual_scheduler) -> RobotCore:
    core = RobotCore("wx200", init_node=False, transport=mock_bus, scheduler=manual_scheduler)
    yield core
    core.shutdown()


@pytest.fixture
def arm(core) -> ArmInterface:
    return ArmInterface(core, "wx200", "arm", moving_time=2.0, accel_time=0.3)


@pytest.mark.parametrize(
    ("moving_time", "accel_time"),
    [(2.0, 1.5), (0.0, 0.0), (1.0, -0.1)],
)
def test_invalid_motion_profile(moving_time, accel_time) -> None:
    with pytest.raises(InvalidMotionProfileError):
        validate_motion_profile(moving_time, accel_time)


def test_accel_time_may_be_exactly_half() -> None:
    validate_motion_profile(2.0, 1.0)


def test_construction_writes_operating_profile(arm, mock_bus) -> None:
    assert arm.joint_names == ("waist", "shoulder", "elbow", "wrist_angle", "wrist_rotate")
    assert mock_bus.read_profile("waist") == (2.0, 0.3)
    assert arm.get_joint_commands() == [0.0] * 5


def test_unknown_group_rejected(core) -> None:
    with pytest.raises(InvalidGroupError, match="legs"):
        ArmInterface(core, "wx200", "legs")


def test_model_mismatch_rejected(core) -> None:
    with pytest.raises(ConstructionError, match="vx300s"):
        ArmInterface(core, "vx300s", "arm")


def test_bad_profile_rejected_at_construction(core) -> None:
    with pytest.raises(InvalidMotionProfileError):
        ArmInterface(core, "wx200", "arm", moving_time=1.0, accel_time=0.8)


def test_set_joint_positions(arm, mock_bus) -> None:
    target = [0.1, -0.2, 0.3, 0.0, 0.5]

    assert arm.set_joint_positions(target, blocking=False)

    assert arm.get_joint_commands() == target
    assert arm.get_joint_positions() == target
    assert arm.get_single_joint_command("elbow") == 0.3


def test_set_joint_positions_wrong_length(arm) -> None:
    with pytest.raises(ValueError, match="Expected 5 positions"):
        arm.set_joint_positions([0.0, 0.0], blocking=False)


def test_set_single_joint_position(arm) -> None:
    assert arm.set_single_joint_position("waist", 0.7, blocking=False)
    assert arm.get_joint_commands() == [0.7, 0.0, 0.0, 0.0, 0.0]

    with pytest.raises(ValueError, match="Unknown joint"):
        arm.set_single_joint_position("gripper", 0.1, blocking=False)


def test_trajectory_time_written_only_on_change(arm, mock_bus) -> None:
    profile_writes = lambda: [c for c in mock_bus.commands if c[0] == "profile"]  # noqa: E731
    assert len(profile_writes()) == 1

    arm.set_trajectory_time(2.0, 0.3)
    assert len(profile_writes()) == 1

    arm.set_joint_positions([0.0] * 5, moving_time=1.0, accel_time=0.2, blocking=False)
    assert len(profile_writes()) == 2
    assert (arm.moving_time, arm.accel_time) == (1.0, 0.2)
    assert mock_bus.read_profile("wrist_rotate") == (1.0, 0.2)


def test_home_and_sleep_poses(arm, core) -> None:
    arm.go_to_sleep_pose(blocking=False)
    assert arm.get_joint_commands() == list(core.profile.sleep_positions)

    arm.go_to_home_pose(blocking=False)
    assert arm.get_joint_commands() == [0.0] * 5


def test_state_monitor_polls_positions(arm, core, manual_scheduler) -> None:
    assert arm.latest_positions is None

    task = arm.start_state_monitor(period=0.1)
    assert arm.start_state_monitor() is task
    assert task.tag == "arm"

    arm.set_joint_positions([0.5, 0.0, 0.0, 0.0, 0.0], blocking=False)
    manual_scheduler.advance_by(0.25)

    assert arm.latest_positions == [0.5, 0.0, 0.0, 0.0, 0.0]
