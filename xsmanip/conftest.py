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

import pytest
from reactivex.scheduler import HistoricalScheduler

from xsmanip.hardware.bus import registry
from xsmanip.hardware.bus.mock import MockBus
from xsmanip.robot.models import get_profile


def _make_bus(robot_model: str = "wx200", **kwargs) -> MockBus:
    profile = get_profile(robot_model)
    return MockBus(
        joint_names=profile.arm_joints,
        gripper_joint=profile.gripper_joint,
        finger_limits=profile.finger_limits,
        **kwargs,
    )


@pytest.fixture
def bus_factory():
    """Build a MockBus matching a robot model's joints."""
    return _make_bus


@pytest.fixture
def mock_bus() -> MockBus:
    return _make_bus()


@pytest.fixture
def manual_scheduler() -> HistoricalScheduler:
    """Virtual clock; timers only tick inside advance_by()."""
    return HistoricalScheduler()


@pytest.fixture
def fresh_node(monkeypatch):
    monkeypatch.setattr(registry, "_node_initialized", False)
