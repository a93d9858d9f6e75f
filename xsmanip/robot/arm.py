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

"""Arm motion interface.

Position commands for the arm joint group, executed by the servos with a
time-based trapezoidal velocity profile: ``moving_time`` is the duration of
the whole move and ``accel_time`` the ramp at each end.
"""

from __future__ import annotations

from collections.abc import Sequence
import threading
import time
from typing import TYPE_CHECKING

from xsmanip.robot.errors import (
    ConstructionError,
    InvalidMotionProfileError,
    TransportUnavailableError,
)
from xsmanip.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from xsmanip.robot.core import RobotCore
    from xsmanip.robot.timers import PeriodicTask

logger = setup_logger()


def validate_motion_profile(moving_time: float, accel_time: float) -> None:
    """Check that ramp-up plus ramp-down fit inside the move.

    Raises:
        InvalidMotionProfileError: If the profile is not a valid trapezoid
    """
    if moving_time <= 0:
        raise InvalidMotionProfileError(f"moving_time must be positive, got {moving_time}")
    if accel_time < 0:
        raise InvalidMotionProfileError(f"accel_time must be non-negative, got {accel_time}")
    if accel_time > moving_time / 2:
        raise InvalidMotionProfileError(
            f"accel_time ({accel_time}s) must be at most half of moving_time ({moving_time}s)"
        )


class ArmInterface:
    """Commands the joints of one arm group through a shared RobotCore.

    Raises (on construction):
        ConstructionError: If ``robot_model`` does not match the core's model
        InvalidGroupError: If ``group_name`` is not a group of the robot
        InvalidMotionProfileError: If the motion profile is invalid
        TransportUnavailableError: If the profile cannot be written to the bus
    """

    def __init__(
        self,
        core: RobotCore,
        robot_model: str,
        group_name: str = "arm",
        moving_time: float = 2.0,
        accel_time: float = 0.3,
    ) -> None:
        if robot_model.lower() != core.profile.model:
            raise ConstructionError(
                f"Arm model {robot_model!r} does not match the core's model {core.profile.model!r}"
            )
        validate_motion_profile(moving_time, accel_time)

        self.core = core
        self.robot_model = robot_model
        self.group_name = group_name
        self.joint_names = core.group_joints(group_name)

        self._lock = threading.Lock()
        self.moving_time = moving_time
        self.accel_time = accel_time
        if not core.set_operating_profile(group_name, moving_time, accel_time):
            raise TransportUnavailableError(
                f"Could not write the operating profile of group '{group_name}'"
            )

        self._joint_commands = list(core.read_group(group_name))
        self._latest_positions: list[float] | None = None

        logger.info(
            f"Arm group '{group_name}' ready",
            joints=list(self.joint_names),
            moving_time=moving_time,
            accel_time=accel_time,
        )

    @property
    def dof(self) -> int:
        return len(self.joint_names)

    # =========================================================================
    # Motion profile
    # =========================================================================

    def set_trajectory_time(
        self, moving_time: float | None = None, accel_time: float | None = None
    ) -> bool:
        """Change the motion profile; only writes to the bus when something changed."""
        new_moving = self.moving_time if moving_time is None else moving_time
        new_accel = self.accel_time if accel_time is None else accel_time
        if (new_moving, new_accel) == (self.moving_time, self.accel_time):
            return True

        validate_motion_profile(new_moving, new_accel)
        if not self.core.set_operating_profile(self.group_name, new_moving, new_accel):
            logger.warning(f"Failed to update the profile of group '{self.group_name}'")
            return False
        self.moving_time = new_moving
        self.accel_time = new_accel
        return True

    # =========================================================================
    # Joint commands
    # =========================================================================

    def set_joint_positions(
        self,
        positions: Sequence[float],
        moving_time: float | None = None,
        accel_time: float | None = None,
        blocking: bool = True,
    ) -> bool:
        """Command every joint of the group.

        Args:
            positions: Target positions in radians, one per joint
            moving_time: Override the move duration for this and later moves
            accel_time: Override the ramp duration for this and later moves
            blocking: Sleep for ``moving_time`` so the move has finished on return
        """
        if len(positions) != self.dof:
            raise ValueError(
                f"Expected {self.dof} positions for {list(self.joint_names)}, got {len(positions)}"
            )
        if not self.set_trajectory_time(moving_time, accel_time):
            return False

        with self._lock:
            if not self.core.write_group(self.group_name, positions):
                return False
            self._joint_commands = list(positions)

        if blocking:
            time.sleep(self.moving_time)
        return True

    def set_single_joint_position(
        self,
        joint_name: str,
        position: float,
        moving_time: float | None = None,
        accel_time: float | None = None,
        blocking: bool = True,
    ) -> bool:
        if joint_name not in self.joint_names:
            raise ValueError(
                f"Unknown joint '{joint_name}'. Valid joints: {list(self.joint_names)}"
            )
        if not self.set_trajectory_time(moving_time, accel_time):
            return False

        with self._lock:
            if not self.core.write_joint(joint_name, position):
                return False
            self._joint_commands[self.joint_names.index(joint_name)] = position

        if blocking:
            time.sleep(self.moving_time)
        return True

    def go_to_home_pose(
        self,
        moving_time: float | None = None,
        accel_time: float | None = None,
        blocking: bool = True,
    ) -> bool:
        return self.set_joint_positions(
            self.core.profile.home_positions, moving_time, accel_time, blocking
        )

    def go_to_sleep_pose(
        self,
        moving_time: float | None = None,
        accel_time: float | None = None,
        blocking: bool = True,
    ) -> bool:
        return self.set_joint_positions(
            self.core.profile.sleep_positions, moving_time, accel_time, blocking
        )

    def get_joint_commands(self) -> list[float]:
        """Last commanded positions (not necessarily reached yet)."""
        with self._lock:
            return list(self._joint_commands)

    def get_single_joint_command(self, joint_name: str) -> float:
        with self._lock:
            return self._joint_commands[self.joint_names.index(joint_name)]

    def get_joint_positions(self) -> list[float]:
        """Positions read from the bus right now."""
        return self.core.read_group(self.group_name)

    # =========================================================================
    # State monitor
    # =========================================================================

    @property
    def latest_positions(self) -> list[float] | None:
        """Positions from the most recent state monitor tick, None before the first tick."""
        with self._lock:
            return None if self._latest_positions is None else list(self._latest_positions)

    def start_state_monitor(self, period: float | None = None) -> PeriodicTask:
        """Poll joint positions periodically. Returns the existing monitor if already scheduled."""
        return self.core.timers.get_or_create(
            self.group_name,
            f"{self.group_name}_state_monitor",
            period or self.core.default_timer_period,
            self._poll_state,
        )

    def _poll_state(self) -> None:
        positions = self.core.read_group(self.group_name)
        with self._lock:
            self._latest_positions = positions


__all__ = ["ArmInterface", "validate_motion_profile"]
