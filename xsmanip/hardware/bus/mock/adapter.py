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

"""In-memory bus transport.

Position commands settle instantly. The gripper joint is modelled as a
finger that travels a fixed step toward open (positive effort) or closed
(negative effort) on every position read, stopping at its travel limits.
"""

from __future__ import annotations

from collections.abc import Sequence
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xsmanip.hardware.bus.registry import TransportRegistry

_FINGER_STEP = 0.005  # meters per read while effort is applied


class MockBus:
    """Simulated servo chain.

    Implements BusTransport via duck typing.
    """

    def __init__(
        self,
        joint_names: Sequence[str] = (),
        gripper_joint: str = "gripper",
        finger_limits: tuple[float, float] = (0.015, 0.037),
        reachable: bool = True,
        **_: object,
    ) -> None:
        self._lock = threading.Lock()
        self._reachable = reachable
        self._connected = False
        self._gripper_joint = gripper_joint
        self._finger_limits = finger_limits
        self._positions: dict[str, float] = {name: 0.0 for name in joint_names}
        self._positions[gripper_joint] = finger_limits[0]
        self._efforts: dict[str, float] = {}
        self._profiles: dict[str, tuple[float, float]] = {}
        self.commands: list[tuple[str, tuple[object, ...]]] = []

    # =========================================================================
    # Connection
    # =========================================================================

    def connect(self) -> bool:
        with self._lock:
            self._connected = self._reachable
            return self._connected

    def disconnect(self) -> None:
        with self._lock:
            self._connected = False

    def is_connected(self) -> bool:
        with self._lock:
            return self._connected

    # =========================================================================
    # Commands
    # =========================================================================

    def write_operating_profile(
        self, joint_names: Sequence[str], moving_time: float, accel_time: float
    ) -> bool:
        with self._lock:
            if not self._connected:
                return False
            for name in joint_names:
                self._profiles[name] = (moving_time, accel_time)
            self.commands.append(("profile", (tuple(joint_names), moving_time, accel_time)))
            return True

    def write_positions(self, joint_names: Sequence[str], positions: Sequence[float]) -> bool:
        if len(joint_names) != len(positions):
            raise ValueError(
                f"Got {len(positions)} positions for {len(joint_names)} joints: {list(joint_names)}"
            )
        with self._lock:
            if not self._connected:
                return False
            for name, value in zip(joint_names, positions, strict=True):
                self._positions[name] = value
            self.commands.append(("positions", (tuple(joint_names), tuple(positions))))
            return True

    def write_effort(self, joint_name: str, effort: float) -> bool:
        with self._lock:
            if not self._connected:
                return False
            self._efforts[joint_name] = effort
            self.commands.append(("effort", (joint_name, effort)))
            return True

    # =========================================================================
    # State
    # =========================================================================

    def read_positions(self, joint_names: Sequence[str]) -> list[float]:
        with self._lock:
            if not self._connected:
                raise RuntimeError("Not connected")
            self._advance_finger()
            return [self._positions[name] for name in joint_names]

    def read_effort(self, joint_name: str) -> float:
        with self._lock:
            return self._efforts.get(joint_name, 0.0)

    def read_profile(self, joint_name: str) -> tuple[float, float] | None:
        with self._lock:
            return self._profiles.get(joint_name)

    def _advance_finger(self) -> None:
        effort = self._efforts.get(self._gripper_joint, 0.0)
        if effort == 0.0:
            return
        lower, upper = self._finger_limits
        step = _FINGER_STEP if effort > 0 else -_FINGER_STEP
        position = self._positions[self._gripper_joint] + step
        self._positions[self._gripper_joint] = min(max(position, lower), upper)


def register(registry: TransportRegistry) -> None:
    """Register this transport with the registry."""
    registry.register("mock", MockBus)


__all__ = ["MockBus"]
