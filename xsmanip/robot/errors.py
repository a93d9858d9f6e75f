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

"""Error types raised while composing a manipulator or tearing down its timers."""

from __future__ import annotations


class ConstructionError(Exception):
    """Failure to build the robot core, the arm interface or the gripper interface."""


class UnknownRobotModelError(ConstructionError):
    def __init__(self, robot_model: str, available: list[str]) -> None:
        super().__init__(f"Unknown robot model: {robot_model!r}. Available: {available}")
        self.robot_model = robot_model
        self.available = available


class TransportUnavailableError(ConstructionError):
    """The actuator bus could not be created or connected."""


class InvalidGroupError(ConstructionError):
    """The requested joint group or gripper joint does not exist on the robot model."""


class InvalidMotionProfileError(ConstructionError):
    """moving_time/accel_time do not describe a valid trapezoidal profile."""


class InvalidGripperError(ConstructionError):
    """Gripper pressure limits are unusable."""


class TimerOperationError(Exception):
    """Failure while stopping or destroying a registered periodic task.

    Attributes:
        tag: Group tag of the task that failed
        task_name: Name of the task that failed
        stage: Which stop_timers stage was running ("group" or "gripper"),
            None when raised directly by the registry
    """

    def __init__(
        self,
        message: str,
        *,
        tag: str | None = None,
        task_name: str | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message)
        self.tag = tag
        self.task_name = task_name
        self.stage = stage


__all__ = [
    "ConstructionError",
    "InvalidGripperError",
    "InvalidGroupError",
    "InvalidMotionProfileError",
    "TimerOperationError",
    "TransportUnavailableError",
    "UnknownRobotModelError",
]
