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

"""Gripper interface.

The gripper is driven in effort mode. A normalized pressure in [0, 1] maps
linearly onto ``[lower_limit, upper_limit]`` effort units; opening applies
positive effort, closing negative effort. A periodic limit monitor tagged
with the gripper name cuts the effort once the fingers reach their travel
limit, so the motor does not stall against the end stop.
"""

from __future__ import annotations

import math
import threading
import time
from typing import TYPE_CHECKING

from xsmanip.robot.errors import InvalidGripperError, InvalidGroupError
from xsmanip.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from xsmanip.robot.core import RobotCore
    from xsmanip.robot.timers import PeriodicTask

logger = setup_logger()


def effort_for_pressure(pressure: float, lower_limit: float, upper_limit: float) -> float:
    """Map a normalized pressure onto the effort range, clamping pressure to [0, 1].

    Raises:
        ValueError: If ``pressure`` is NaN or infinite
    """
    if not math.isfinite(pressure):
        raise ValueError(f"Gripper pressure must be a finite number, got {pressure}")
    pressure = min(max(pressure, 0.0), 1.0)
    return lower_limit + pressure * (upper_limit - lower_limit)


class GripperInterface:
    """Opens and closes the gripper of one robot through a shared RobotCore.

    Raises (on construction):
        InvalidGroupError: If ``gripper_name`` is not a joint of the robot
        InvalidGripperError: If the pressure limits are unusable
    """

    def __init__(
        self,
        core: RobotCore,
        gripper_name: str = "gripper",
        gripper_pressure: float = 0.5,
        gripper_pressure_lower_limit: float = 150,
        gripper_pressure_upper_limit: float = 350,
    ) -> None:
        if gripper_name not in core.profile.joints:
            raise InvalidGroupError(
                f"'{gripper_name}' is not a joint of {core.profile.model}. "
                f"Joints: {list(core.profile.joints)}"
            )
        if gripper_pressure_lower_limit < 0:
            raise InvalidGripperError(
                "gripper_pressure_lower_limit must be non-negative, "
                f"got {gripper_pressure_lower_limit}"
            )
        if gripper_pressure_lower_limit > gripper_pressure_upper_limit:
            raise InvalidGripperError(
                f"gripper_pressure_lower_limit ({gripper_pressure_lower_limit}) exceeds "
                f"gripper_pressure_upper_limit ({gripper_pressure_upper_limit})"
            )
        if not math.isfinite(gripper_pressure):
            raise InvalidGripperError(f"gripper_pressure must be finite, got {gripper_pressure}")

        self.core = core
        self.gripper_name = gripper_name
        self.lower_limit = gripper_pressure_lower_limit
        self.upper_limit = gripper_pressure_upper_limit
        self.finger_lower_limit, self.finger_upper_limit = core.profile.finger_limits

        self._lock = threading.Lock()
        self._commanded_effort = 0.0
        self.gripper_pressure = gripper_pressure
        self.gripper_value = effort_for_pressure(
            gripper_pressure, self.lower_limit, self.upper_limit
        )

        logger.info(
            f"Gripper '{gripper_name}' ready",
            pressure=gripper_pressure,
            effort=self.gripper_value,
        )

    # =========================================================================
    # Pressure
    # =========================================================================

    def set_pressure(self, pressure: float) -> float:
        """Set the normalized pressure used by later open/close calls. Returns the new effort."""
        effort = effort_for_pressure(pressure, self.lower_limit, self.upper_limit)
        self.gripper_pressure = pressure
        self.gripper_value = effort
        return effort

    @property
    def commanded_effort(self) -> float:
        with self._lock:
            return self._commanded_effort

    @property
    def is_moving(self) -> bool:
        return self.commanded_effort != 0.0

    # =========================================================================
    # Commands
    # =========================================================================

    def open(self, delay: float = 1.0) -> bool:
        return self._move(self.gripper_value, delay)

    def close(self, delay: float = 1.0) -> bool:
        return self._move(-self.gripper_value, delay)

    def release(self, delay: float = 1.0) -> bool:
        """Alias of open()."""
        return self.open(delay)

    def grasp(self, delay: float = 1.0) -> bool:
        """Alias of close()."""
        return self.close(delay)

    def stop(self) -> bool:
        """Cut the gripper effort."""
        return self._write_effort(0.0)

    def finger_position(self) -> float:
        """Current finger travel in meters."""
        return self.core.read_group(self.gripper_name)[0]

    def _move(self, effort: float, delay: float) -> bool:
        self.start_limit_monitor()
        if not self._write_effort(effort):
            return False
        if delay > 0:
            time.sleep(delay)
        return True

    def _write_effort(self, effort: float) -> bool:
        with self._lock:
            if not self.core.write_effort(self.gripper_name, effort):
                logger.warning(f"Failed to command effort {effort} on '{self.gripper_name}'")
                return False
            self._commanded_effort = effort
            return True

    # =========================================================================
    # Limit monitor
    # =========================================================================

    def start_limit_monitor(self, period: float | None = None) -> PeriodicTask:
        """Schedule the finger limit check. Returns the existing monitor if already scheduled."""
        return self.core.timers.get_or_create(
            self.gripper_name,
            f"{self.gripper_name}_limit_monitor",
            period or self.core.default_timer_period,
            self.check_limits,
        )

    def check_limits(self) -> None:
        """Stop the fingers once they reach the end of their travel."""
        effort = self.commanded_effort
        if effort == 0.0:
            return
        position = self.finger_position()
        if (effort > 0 and position >= self.finger_upper_limit) or (
            effort < 0 and position <= self.finger_lower_limit
        ):
            self.stop()
            logger.debug(f"Gripper '{self.gripper_name}' reached its limit", position=position)


__all__ = ["GripperInterface", "effort_for_pressure"]
