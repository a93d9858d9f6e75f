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

"""Interbotix X-series manipulator composition.

A Manipulator owns one RobotCore (the actuator bus and the timer registry),
one ArmInterface and, optionally, one GripperInterface.

Example:
    >>> from xsmanip.robot import Manipulator
    >>>
    >>> bot = Manipulator.create("wx200", gripper_pressure=0.8)
    >>> bot.arm.set_joint_positions([0.0, -0.5, 0.5, 0.0, 0.0])
    >>> bot.gripper.open()
    >>> result = bot.stop_timers()
    >>> result.raise_for_error()
    >>> bot.shutdown()
"""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submod_attrs={
        "arm": ["ArmInterface", "validate_motion_profile"],
        "config": ["ManipulatorConfig", "TimerCleanupPolicy"],
        "core": ["RobotCore"],
        "errors": [
            "ConstructionError",
            "InvalidGripperError",
            "InvalidGroupError",
            "InvalidMotionProfileError",
            "TimerOperationError",
            "TransportUnavailableError",
            "UnknownRobotModelError",
        ],
        "gripper": ["GripperInterface", "effort_for_pressure"],
        "manipulator": ["Manipulator", "TimerStopResult"],
        "models": ["ROBOT_PROFILES", "RobotProfile", "available_models", "get_profile"],
        "timers": ["PeriodicTask", "TimerRegistry"],
    },
)
