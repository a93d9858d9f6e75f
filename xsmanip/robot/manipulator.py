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

"""Manipulator - composes the robot core, the arm and the optional gripper.

Construction order is fixed: RobotCore first, then ArmInterface, then the
GripperInterface when the config names a gripper. Both interfaces share the
one RobotCore and never outlive it. If building the arm or the gripper fails,
the core is shut down and the error propagates unchanged; no partially built
Manipulator is ever returned.

Example:
    >>> from xsmanip.robot import Manipulator
    >>>
    >>> with Manipulator.create("wx200", moving_time=1.5) as bot:
    ...     bot.arm.go_to_home_pose()
    ...     bot.gripper.close()
    ...     bot.arm.go_to_sleep_pose()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from xsmanip.robot.arm import ArmInterface
from xsmanip.robot.config import ManipulatorConfig, TimerCleanupPolicy
from xsmanip.robot.core import RobotCore
from xsmanip.robot.errors import TimerOperationError
from xsmanip.robot.gripper import GripperInterface
from xsmanip.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from types import TracebackType

    from reactivex.abc import SchedulerBase

    from xsmanip.core.global_config import GlobalConfig
    from xsmanip.hardware.bus.spec import BusTransport

logger = setup_logger()


def _as_timer_error(exc: Exception, tag: str, stage: str) -> TimerOperationError:
    if isinstance(exc, TimerOperationError):
        error = exc
    else:
        error = TimerOperationError(str(exc), tag=tag)
        error.__cause__ = exc
    error.stage = stage
    return error


@dataclass
class TimerStopResult:
    """Outcome of Manipulator.stop_timers().

    Attributes:
        success: True if every stop/destroy step succeeded
        stopped: Names of the timers torn down, keyed by tag (a tag that was
            looked up but had no timers maps to an empty list)
        failed_stage: "group" or "gripper" when a step failed
        error: The failure, with its stage attached
    """

    success: bool = True
    stopped: dict[str, list[str]] = field(default_factory=dict)
    failed_stage: str | None = None
    error: TimerOperationError | None = None

    def __bool__(self) -> bool:
        return self.success

    def raise_for_error(self) -> None:
        """Raise the captured error, if any."""
        if self.error is not None:
            raise self.error


class Manipulator:
    """One Interbotix arm with its optional gripper.

    Attributes:
        config: The validated parameters this manipulator was built from
        core: Owner of the actuator bus and of the timer registry
        arm: Arm motion interface
        gripper: Gripper interface, None when ``config.gripper_name`` is empty

    Raises (on construction):
        ConstructionError: Any failure to build the core, the arm or the gripper
    """

    def __init__(
        self,
        config: ManipulatorConfig,
        *,
        transport: BusTransport | None = None,
        scheduler: SchedulerBase | None = None,
        global_config: GlobalConfig | None = None,
    ) -> None:
        self.config = config

        self.core = RobotCore(
            config.robot_model,
            config.robot_name,
            config.init_node,
            transport=transport,
            scheduler=scheduler,
            global_config=global_config,
        )

        try:
            self.arm = ArmInterface(
                self.core,
                config.robot_model,
                config.group_name,
                moving_time=config.moving_time,
                accel_time=config.accel_time,
            )

            self.gripper: GripperInterface | None = None
            if config.has_gripper:
                self.gripper = GripperInterface(
                    self.core,
                    config.gripper_name,
                    gripper_pressure=config.gripper_pressure,
                    gripper_pressure_lower_limit=config.gripper_pressure_lower_limit,
                    gripper_pressure_upper_limit=config.gripper_pressure_upper_limit,
                )
        except Exception:
            self.core.shutdown()
            raise

        logger.info(
            f"Manipulator {self.core.namespace} composed",
            group=self.group_name,
            gripper=self.gripper_name or None,
        )

    @classmethod
    def create(
        cls,
        robot_model: str,
        group_name: str = "arm",
        gripper_name: str = "gripper",
        robot_name: str = "",
        *,
        transport: BusTransport | None = None,
        scheduler: SchedulerBase | None = None,
        global_config: GlobalConfig | None = None,
        **options: Any,
    ) -> Manipulator:
        """Validate keyword parameters into a ManipulatorConfig and compose.

        Raises:
            pydantic.ValidationError: On unknown options or out-of-range values
        """
        config = ManipulatorConfig(
            robot_model=robot_model,
            group_name=group_name,
            gripper_name=gripper_name,
            robot_name=robot_name,
            **options,
        )
        return cls(config, transport=transport, scheduler=scheduler, global_config=global_config)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def group_name(self) -> str:
        return self.config.group_name

    @property
    def gripper_name(self) -> str:
        return self.config.gripper_name

    @property
    def robot_name(self) -> str:
        return self.core.robot_name

    # =========================================================================
    # Timers
    # =========================================================================

    def stop_timers(self, policy: TimerCleanupPolicy | None = None) -> TimerStopResult:
        """Stop and delete every timer tagged with the group name or the gripper name.

        Arm group timers are stopped, then deleted, before the gripper timers
        are looked up. The first failure ends the procedure; it is logged and
        returned in the result rather than raised.

        Args:
            policy: Override ``config.timer_cleanup`` for this call
        """
        policy = policy or self.config.timer_cleanup
        result = TimerStopResult()

        if self.gripper is None and policy is TimerCleanupPolicy.GRIPPER_GATED:
            logger.info("Manipulator has no timers to be stopped.")
            return result

        stages = [("group", self.group_name)]
        if self.gripper is not None:
            stages.append(("gripper", self.gripper_name))

        for stage, tag in stages:
            try:
                result.stopped[tag] = self._stop_tagged(tag, stage)
            except Exception as e:
                result.success = False
                result.failed_stage = stage
                result.error = _as_timer_error(e, tag, stage)
                logger.error(
                    f"Something went wrong when stopping {stage} timers. "
                    "Use core.shutdown() to stop and delete all timers instead.",
                    tag=tag,
                    error=str(e),
                )
                return result

        logger.info("All timers in manipulator stopped and deleted.")
        return result

    def _stop_tagged(self, tag: str, stage: str) -> list[str]:
        timers = self.core.timers.find_by_tag(tag)
        if not timers:
            logger.info(f"No timers to delete in {stage}.", tag=tag)
            return []

        for task in timers:
            self.core.timers.stop(task)
            logger.info(f"{task.name} stopped successfully.", tag=tag)
        for task in timers:
            self.core.timers.destroy(task)
        logger.info(f"All {stage} timers deleted successfully.", tag=tag)
        return [task.name for task in timers]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def shutdown(self) -> None:
        """Stop every timer and release the bus. Safe to call more than once."""
        if self.core.is_shutdown:
            return
        result = self.stop_timers(TimerCleanupPolicy.ALL_GROUPS)
        if not result:
            logger.warning(
                f"Timer cleanup failed in the {result.failed_stage} stage, forcing shutdown"
            )
        self.core.shutdown()

    def __enter__(self) -> Manipulator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.shutdown()


__all__ = ["Manipulator", "TimerStopResult"]
