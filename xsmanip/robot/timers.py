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

"""Periodic background tasks ("timers") and the registry that tracks them.

Each RobotCore owns one TimerRegistry. Arm and gripper interfaces schedule
their periodic work through it, tagging every task with their group name so
the whole group can be found and torn down together.

Ticks are driven by ``reactivex.interval`` on a pluggable scheduler; tests
pass a ``HistoricalScheduler`` and advance virtual time by hand.
"""

from __future__ import annotations

from collections.abc import Callable
import threading
from typing import TYPE_CHECKING

import reactivex as rx

from xsmanip.robot.errors import TimerOperationError
from xsmanip.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from reactivex.abc import DisposableBase, SchedulerBase

logger = setup_logger()


class PeriodicTask:
    """A callback invoked every ``period`` seconds until stopped.

    ``stop()`` blocks until an invocation already in progress has returned.
    There is no timeout: a callback that never returns blocks ``stop()``
    forever. For the same reason two callbacks running on different
    scheduler threads must not stop each other's tasks: each holds its own
    run lock while waiting for the other's, and both block forever.
    """

    def __init__(
        self,
        tag: str,
        name: str,
        period: float,
        callback: Callable[[], None],
        scheduler: SchedulerBase | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError(f"Timer '{name}' needs a positive period, got {period}")
        self.tag = tag
        self.name = name
        self.period = period
        self._callback = callback
        self._scheduler = scheduler
        self._subscription: DisposableBase | None = None
        self._state_lock = threading.Lock()
        # Held for the duration of each invocation. Reentrant so a callback may stop its own task.
        self._run_lock = threading.RLock()
        self._destroyed = False
        self.invocations = 0

    def __repr__(self) -> str:
        state = "running" if self.is_running else "stopped"
        return f"PeriodicTask(tag={self.tag!r}, name={self.name!r}, period={self.period}, {state})"

    @property
    def is_running(self) -> bool:
        with self._state_lock:
            return self._subscription is not None

    @property
    def is_destroyed(self) -> bool:
        with self._state_lock:
            return self._destroyed

    def start(self) -> None:
        with self._state_lock:
            if self._destroyed:
                raise RuntimeError(f"Timer '{self.name}' was destroyed and cannot be restarted")
            if self._subscription is not None:
                return
            self._subscription = rx.interval(self.period, scheduler=self._scheduler).subscribe(
                lambda _: self._tick()
            )

    def stop(self) -> None:
        with self._state_lock:
            subscription, self._subscription = self._subscription, None
        if subscription is None:
            return
        subscription.dispose()
        # Wait out an invocation that was already running when we disposed
        with self._run_lock:
            pass

    def _tick(self) -> None:
        with self._run_lock:
            if not self.is_running:
                return
            try:
                self._callback()
            except Exception:
                logger.exception(f"Timer '{self.name}' callback failed", tag=self.tag)
            self.invocations += 1

    def _mark_destroyed(self) -> None:
        with self._state_lock:
            self._destroyed = True


class TimerRegistry:
    """Tracks the periodic tasks of one robot, keyed by (tag, name)."""

    def __init__(self, scheduler: SchedulerBase | None = None) -> None:
        self._scheduler = scheduler
        self._tasks: dict[tuple[str, str], PeriodicTask] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create(
        self,
        tag: str,
        name: str,
        period: float,
        callback: Callable[[], None],
        start: bool = True,
    ) -> PeriodicTask:
        """Register a new periodic task, started unless ``start`` is False.

        Raises:
            ValueError: If a task with the same tag and name already exists
        """
        task = PeriodicTask(tag, name, period, callback, scheduler=self._scheduler)
        with self._lock:
            if (tag, name) in self._tasks:
                raise ValueError(f"Timer '{name}' already registered under tag '{tag}'")
            self._tasks[(tag, name)] = task
        if start:
            task.start()
        logger.debug(f"Created timer '{name}'", tag=tag, period=period)
        return task

    def get_or_create(
        self,
        tag: str,
        name: str,
        period: float,
        callback: Callable[[], None],
    ) -> PeriodicTask:
        """Return the task registered as (tag, name), creating and starting it if absent.

        Lookup and registration happen under one lock, so concurrent callers
        all receive the same task.
        """
        with self._lock:
            task = self._tasks.get((tag, name))
            if task is not None:
                return task
            task = PeriodicTask(tag, name, period, callback, scheduler=self._scheduler)
            self._tasks[(tag, name)] = task
        task.start()
        logger.debug(f"Created timer '{name}'", tag=tag, period=period)
        return task

    def find_by_tag(self, tag: str) -> list[PeriodicTask]:
        """All tasks carrying ``tag``, in creation order."""
        with self._lock:
            return [task for (task_tag, _), task in self._tasks.items() if task_tag == tag]

    def all(self) -> list[PeriodicTask]:
        with self._lock:
            return list(self._tasks.values())

    def stop(self, task: PeriodicTask) -> None:
        """Stop a registered task, waiting for an in-flight invocation.

        Raises:
            TimerOperationError: If the task is not registered or fails to stop
        """
        self._require_registered(task, "stop")
        try:
            task.stop()
        except Exception as e:
            raise TimerOperationError(
                f"Failed to stop timer '{task.name}': {e}", tag=task.tag, task_name=task.name
            ) from e

    def destroy(self, task: PeriodicTask) -> None:
        """Deregister a task. A still-running task is stopped first.

        Raises:
            TimerOperationError: If the task is not registered or fails to stop
        """
        self._require_registered(task, "destroy")
        if task.is_running:
            self.stop(task)
        with self._lock:
            if self._tasks.get((task.tag, task.name)) is not task:
                raise TimerOperationError(
                    f"Timer '{task.name}' was removed concurrently",
                    tag=task.tag,
                    task_name=task.name,
                )
            del self._tasks[(task.tag, task.name)]
        task._mark_destroyed()

    def _require_registered(self, task: PeriodicTask, operation: str) -> None:
        with self._lock:
            registered = self._tasks.get((task.tag, task.name)) is task
        if not registered:
            raise TimerOperationError(
                f"Cannot {operation} timer '{task.name}': not registered under tag '{task.tag}'",
                tag=task.tag,
                task_name=task.name,
            )


__all__ = ["PeriodicTask", "TimerRegistry"]
