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

from pathlib import Path

XSMANIP_PROJECT_ROOT = Path(__file__).parent.parent

XSMANIP_LOG_DIR = XSMANIP_PROJECT_ROOT / "logs"

# Interbotix X-series defaults
DEFAULT_GROUP_NAME = "arm"
DEFAULT_GRIPPER_NAME = "gripper"
DEFAULT_MOVING_TIME = 2.0
DEFAULT_ACCEL_TIME = 0.3
DEFAULT_GRIPPER_PRESSURE = 0.5
DEFAULT_GRIPPER_PRESSURE_LOWER_LIMIT = 150.0
DEFAULT_GRIPPER_PRESSURE_UPPER_LIMIT = 350.0
