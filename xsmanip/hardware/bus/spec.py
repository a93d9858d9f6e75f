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

"""Actuator bus transport protocol.

A transport owns the physical (or simulated) link to the servo chain of one
robot. Arm and gripper interfaces share a single transport and interleave
their calls, so implementations must tolerate access from several threads.

Units: positions in radians, gripper finger travel in meters, effort in raw
motor units (PWM or mA depending on the gripper's operating mode).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class BusTransport(Protocol):
    # Connection
    def connect(self) -> bool:
        """Open the link. Returns False if the bus is unreachable."""
        ...

    def disconnect(self) -> None: ...

    def is_connected(self) -> bool: ...

    # Configuration
    def write_operating_profile(
        self, joint_names: Sequence[str], moving_time: float, accel_time: float
    ) -> bool:
        """Set the time-based trapezoidal profile used by subsequent position commands."""
        ...

    # Commands
    def write_positions(self, joint_names: Sequence[str], positions: Sequence[float]) -> bool: ...

    def write_effort(self, joint_name: str, effort: float) -> bool:
        """Command raw effort on a single joint (used by the gripper)."""
        ...

    # State
    def read_positions(self, joint_names: Sequence[str]) -> list[float]: ...


__all__ = ["BusTransport"]
