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

"""Pick-and-place dance on a simulated wx200.

Run with XSMANIP_TRANSPORT=mock (the default).
"""

from xsmanip.robot import Manipulator
from xsmanip.utils.logging_config import setup_logger

logger = setup_logger()


def main() -> None:
    with Manipulator.create("wx200", moving_time=1.0, accel_time=0.2) as bot:
        bot.arm.start_state_monitor()
        bot.arm.go_to_home_pose()
        bot.gripper.open()
        bot.arm.set_single_joint_position("waist", 0.8)
        bot.gripper.close()
        bot.arm.set_single_joint_position("waist", -0.8)
        bot.gripper.open()
        bot.arm.go_to_sleep_pose()

        result = bot.stop_timers()
        logger.info("Timers stopped", success=result.success, stopped=result.stopped)
        result.raise_for_error()


if __name__ == "__main__":
    main()
