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

import threading

import pytest

from xsmanip.robot.errors import TimerOperationError
from xsmanip.robot.timers import PeriodicTask, TimerRegistry

@pytest.fixture
def registry(manual_scheduler) -> TimerRegistry:
    return TimerRegistry(manual_scheduler)

def test_task_ticks_on_schedule(registry, manual_scheduler) -> None:
    calls: list[int] = []
    task = registry.create("arm", "poll", 0.25, lambda: calls.append(1))

    manual_scheduler.advance_by(1.1)

    assert task.is_running
    assert len(calls) == 4
    assert task.invocations == 4

def test_stopped_task_no_longer_ticks(registry, manual_scheduler) -> None:
    calls: list[int] = []
    task = registry.create("arm", "poll", 0.25, lambda: calls.append(1))
    manual_scheduler.advance_by(0.6)

    registry.stop(task)
    manual_scheduler.advance_by(5.0)

    assert not task.is_running
    assert len(calls) == 2

def test_create_without_start(registry, manual_scheduler) -> None:
    task = registry.create("arm", "poll", 0.1, lambda: None, start=False)
    manual_scheduler.advance_by(1.0)

    assert not task.is_running
    assert task.invocations == 0

def test_failing_callback_keeps_ticking(registry, manual_scheduler) -> None:
    def boom() -> None:
        raise RuntimeError("servo read failed")

    task = registry.create("gripper", "limits", 0.25, boom)
    manual_scheduler.advance_by(1.1)

    assert task.is_running
    assert task.invocations == 4

def test_callback_can_stop_its_own_task(registry, manual_scheduler) -> None:
    tasks: list[PeriodicTask] = []
    tasks.append(registry.create("arm", "once", 0.25, lambda: tasks[0].stop()))

    manual_scheduler.advance_by(2.0)

    assert not tasks[0].is_running
    assert tasks[0].invocations == 1

def test_find_by_tag_in_creation_order(registry) -> None:
    first = registry.create("arm", "a", 0.1, lambda: None, start=False)
    registry.create("gripper", "g", 0.1, lambda: None, start=False)
    second = registry.create("arm", "b", 0.1, lambda: None, start=False)

    assert registry.find_by_tag("arm") == [first, second]
    assert registry.find_by_tag("missing") == []
    assert len(registry) == 3

def test_duplicate_name_within_tag_rejected(registry) -> None:
    registry.create("arm", "poll", 0.1, lambda: None, start=False)
    with pytest.raises(ValueError, match="already registered"):
        registry.create("arm", "poll", 0.1, lambda: None, start=False)
    # same name under another tag is fine
    registry.create("gripper", "poll", 0.1, lambda: None, start=False)

def test_get_or_create_returns_existing_task(registry, manual_scheduler) -> None:
    task = registry.get_or_create("arm", "poll", 0.25, lambda: None)
    assert task.is_running
    assert registry.get_or_create("arm", "poll", 0.5, lambda: None) is task
    assert len(registry) == 1

def test_get_or_create_from_concurrent_threads(registry) -> None:
    barrier = threading.Barrier(8)
    results: list[PeriodicTask] = []
    errors: list[Exception] = []

    def worker() -> None:
        barrier.wait()
        try:
            results.append(registry.get_or_create("gripper", "monitor", 0.1, lambda: None))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert errors == []
    assert len(results) == 8
    assert all(task is results[0] for task in results)
    assert registry.find_by_tag("gripper") == [results[0]]

def test_destroy_deregisters_and_stops(registry, manual_scheduler) -> None:
    task = registry.create("arm", "poll", 0.25, lambda: None)

    registry.destroy(task)
    manual_scheduler.advance_by(1.0)

    assert registry.find_by_tag("arm") == []
    assert not task.is_running
    assert task.is_destroyed
    assert task.invocations == 0
    with pytest.raises(RuntimeError, match="destroyed"):
        task.start()

def test_operations_on_unregistered_task_raise(registry) -> None:
    task = registry.create("arm", "poll", 0.1, lambda: None, start=False)
    registry.destroy(task)

    with pytest.raises(TimerOperationError) as exc_info:
        registry.destroy(task)
    assert exc_info.value.tag == "arm"
    assert exc_info.value.task_name == "poll"

    with pytest.raises(TimerOperationError):
        registry.stop(task)

def test_stop_failure_is_wrapped(registry, monkeypatch) -> None:
    task = registry.create("arm", "poll", 0.1, lambda: None, start=False)

    def broken_stop() -> None:
        raise OSError("scheduler gone")

    monkeypatch.setattr(task, "stop", broken_stop)

    with pytest.raises(TimerOperationError, match="scheduler gone") as exc_info:
        registry.stop(task)
    assert isinstance(exc_info.value.__cause__, OSError)

def test_non_positive_period_rejected() -> None:
    with pytest.raises(ValueError, match="positive period"):
        PeriodicTask("arm", "poll", 0.0, lambda: None)
