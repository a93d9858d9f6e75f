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

"""Validated construction parameters of a Manipulator."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from xsmanip.constants import (
    DEFAULT_ACCEL_TIME,
    DEFAULT_GRIPPER_NAME,
    DEFAULT_GRIPPER_PRESSURE,
    DEFAULT_GRIPPER_PRESSURE_LOWER_LIMIT,
    DEFAULT_GRIPPER_PRESSURE_UPPER_LIMIT,
    DEFAULT_GROUP_NAME,
    DEFAULT_MOVING_TIME,
)


class TimerCleanupPolicy(Enum):
    """Which timers stop_timers() tears down on a manipulator without a gripper.

    GRIPPER_GATED: none at all, not even the arm group's
    ALL_GROUPS: the arm group's timers as well
    """

    GRIPPER_GATED = "gripper_gated"
    ALL_GROUPS = "all_groups"


class ManipulatorConfig(BaseModel):
    """Immutable parameter set of one manipulator.

    Attributes:
        robot_model: Interbotix arm model (e.g. "wx200" or "vx300s")
        group_name: Joint group holding the arm joints
        gripper_name: Gripper joint name; empty means the arm has no gripper
        robot_name: Namespace of the robot; defaults to robot_model, customize it
            to drive two identical arms from one process ("arm1", "arm2")
        moving_time: Seconds for all arm joints to complete one move
        accel_time: Seconds to accelerate to / decelerate from max speed;
            ArmInterface rejects values above moving_time / 2
        gripper_pressure: Fraction where 0 operates the gripper at the lower
            effort limit and 1 at the upper limit; clamped by the gripper
        gripper_pressure_lower_limit: Lowest effort still able to move the
            fingers (~150 PWM or ~400 mA)
        gripper_pressure_upper_limit: Highest effort the motor holds for a few
            seconds without overloading (~350 PWM or ~900 mA)
        init_node: Let RobotCore perform process-wide transport initialization
        timer_cleanup: stop_timers() behaviour for gripper-less manipulators
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    robot_model: str = Field(min_length=1)
    group_name: str = Field(default=DEFAULT_GROUP_NAME, min_length=1)
    gripper_name: str = DEFAULT_GRIPPER_NAME
    robot_name: str = ""
    moving_time: float = Field(default=DEFAULT_MOVING_TIME, gt=0)
    accel_time: float = Field(default=DEFAULT_ACCEL_TIME, ge=0)
    gripper_pressure: float = Field(default=DEFAULT_GRIPPER_PRESSURE, allow_inf_nan=False)
    gripper_pressure_lower_limit: float = Field(default=DEFAULT_GRIPPER_PRESSURE_LOWER_LIMIT, ge=0)
    gripper_pressure_upper_limit: float = Field(default=DEFAULT_GRIPPER_PRESSURE_UPPER_LIMIT, ge=0)
    init_node: bool = True
    timer_cleanup: TimerCleanupPolicy = TimerCleanupPolicy.GRIPPER_GATED

    @model_validator(mode="before")
    @classmethod
    def _default_robot_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("robot_name"):
            data = {**data, "robot_name": data.get("robot_model", "")}
        return data

    @model_validator(mode="after")
    def _check_pressure_limits(self) -> ManipulatorConfig:
        if self.gripper_pressure_lower_limit > self.gripper_pressure_upper_limit:
            raise ValueError(
                f"gripper_pressure_lower_limit ({self.gripper_pressure_lower_limit}) exceeds "
                f"gripper_pressure_upper_limit ({self.gripper_pressure_upper_limit})"
            )
        return self

    @property
    def has_gripper(self) -> bool:
        return self.gripper_name != ""


__all__ = ["ManipulatorConfig", "TimerCleanupPolicy"]
