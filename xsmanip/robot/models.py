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

"""Kinematic/motor profiles of the supported Interbotix X-series arms.

Joint positions are radians; gripper finger limits are meters of finger
travel as reported by the bus for the gripper joint.
"""

from __future__ import annotations

from dataclasses import dataclass

from xsmanip.robot.errors import UnknownRobotModelError

_JOINTS_4DOF = ("waist", "shoulder", "elbow", "wrist_angle")
_JOINTS_5DOF = ("waist", "shoulder", "elbow", "wrist_angle", "wrist_rotate")
_JOINTS_6DOF = ("waist", "shoulder", "elbow", "forearm_roll", "wrist_angle", "wrist_rotate")

# Viper arms carry the larger gripper
_VX_FINGER = (0.021, 0.057)


@dataclass(frozen=True)
class RobotProfile:
    """Static description of one arm model.

    Attributes:
        model: Model identifier (e.g. "wx200")
        arm_joints: Ordered joint names of the "arm" group
        sleep_positions: Folded rest pose, one entry per arm joint
        gripper_joint: Name of the gripper joint
        finger_limits: (fully closed, fully open) finger travel in meters
    """

    model: str
    arm_joints: tuple[str, ...]
    sleep_positions: tuple[float, ...]
    gripper_joint: str = "gripper"
    finger_limits: tuple[float, float] = (0.015, 0.037)

    @property
    def dof(self) -> int:
        return len(self.arm_joints)

    @property
    def home_positions(self) -> tuple[float, ...]:
        return (0.0,) * self.dof

    @property
    def groups(self) -> dict[str, tuple[str, ...]]:
        """Joint groups addressable on the bus; "all" also holds the gripper."""
        return {
            "arm": self.arm_joints,
            "all": (*self.arm_joints, self.gripper_joint),
        }

    @property
    def joints(self) -> tuple[str, ...]:
        return self.groups["all"]


ROBOT_PROFILES: dict[str, RobotProfile] = {
    profile.model: profile
    for profile in (
        RobotProfile("px100", _JOINTS_4DOF, (0.0, -1.88, 1.5, 0.8)),
        RobotProfile("px150", _JOINTS_5DOF, (0.0, -1.80, 1.55, 0.8, 0.0)),
        RobotProfile("rx150", _JOINTS_5DOF, (0.0, -1.80, 1.55, 0.8, 0.0)),
        RobotProfile("rx200", _JOINTS_5DOF, (0.0, -1.88, 1.5, 0.8, 0.0)),
        RobotProfile("wx200", _JOINTS_5DOF, (0.0, -1.80, 1.55, 0.8, 0.0)),
        RobotProfile("wx250", _JOINTS_5DOF, (0.0, -1.80, 1.55, 0.8, 0.0)),
        RobotProfile("wx250s", _JOINTS_6DOF, (0.0, -1.80, 1.55, 0.0, 0.8, 0.0)),
        RobotProfile("vx250", _JOINTS_5DOF, (0.0, -1.85, 1.55, 0.8, 0.0), finger_limits=_VX_FINGER),
        RobotProfile("vx300", _JOINTS_5DOF, (0.0, -1.85, 1.55, 0.8, 0.0), finger_limits=_VX_FINGER),
        RobotProfile(
            "vx300s", _JOINTS_6DOF, (0.0, -1.85, 1.55, 0.0, 0.8, 0.0), finger_limits=_VX_FINGER
        ),
    )
}


def available_models() -> list[str]:
    return sorted(ROBOT_PROFILES)


def get_profile(robot_model: str) -> RobotProfile:
    """Look up the profile for ``robot_model``.

    Raises:
        UnknownRobotModelError: If the model is not an Interbotix X-series arm
    """
    try:
        return ROBOT_PROFILES[robot_model.lower()]
    except KeyError:
        raise UnknownRobotModelError(robot_model, available_models()) from None


__all__ = ["ROBOT_PROFILES", "RobotProfile", "available_models", "get_profile"]
