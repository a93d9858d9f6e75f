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

"""RobotCore - sole owner of the actuator bus for one manipulator.

The arm and gripper interfaces both hold a reference to the same RobotCore
and never own the transport themselves. The core also owns the TimerRegistry
in which those interfaces schedule their periodic work, so timers of two
robots with identical group names never see each other.
"""

from __future__ import annotations

from collections.abc import Sequence
import threading
from typing import TYPE_CHECKING

from xsmanip.core.global_config import GlobalConfig
from xsmanip.hardware.bus.registry import init_node as init_transport_node, transport_registry
from xsmanip.hardware.bus.spec import BusTransport
from xsmanip.robot.errors import InvalidGroupError, TransportUnavailableError
from xsmanip.robot.models import get_profile
from xsmanip.robot.timers import TimerRegistry
from xsmanip.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from reactivex.abc import SchedulerBase

    from xsmanip.robot.models import RobotProfile

logger = setup_logger()


class RobotCore:
    """Connection to one robot's servo chain.

    Args:
        robot_model: Interbotix model identifier (e.g. "wx200")
        robot_name: Namespace of this robot; defaults to ``robot_model``
        init_node: Perform process-wide transport initialization first
        transport: Pre-built transport; created from GlobalConfig.transport if None
        scheduler: reactivex scheduler driving this robot's timers
        global_config: Process settings; read from the environment if None

    Raises:
        UnknownRobotModelError: If ``robot_model`` is not supported
        TransportUnavailableError: If the transport cannot be created or connected
    """

    def __init__(
        self,
        robot_model: str,
        robot_name: str = "",
        init_node: bool = True,
        transport: BusTransport | None = None,
        scheduler: SchedulerBase | None = None,
        global_config: GlobalConfig | None = None,
    ) -> None:
        self.profile: RobotProfile = get_profile(robot_model)
        self.robot_model = robot_model
        self.robot_name = robot_name or robot_model
        self._config = global_config or GlobalConfig()

        if init_node:
            init_transport_node()

        self._transport = transport if transport is not None else self._create_transport()
        if not isinstance(self._transport, BusTransport):
            raise TransportUnavailableError(
                f"{type(self._transport).__name__} does not implement BusTransport"
            )
        if not self._transport.connect():
            raise TransportUnavailableError(f"Could not connect to the bus of {self.namespace}")

        self.timers = TimerRegistry(scheduler)
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

        logger.info(f"RobotCore ready for {self.namespace}", model=self.profile.model)

    def _create_transport(self) -> BusTransport:
        try:
            return transport_registry.create(
                self._config.transport,
                joint_names=self.profile.arm_joints,
                gripper_joint=self.profile.gripper_joint,
                finger_limits=self.profile.finger_limits,
            )
        except KeyError as e:
            raise TransportUnavailableError(str(e)) from e

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def namespace(self) -> str:
        return f"/{self.robot_name}"

    @property
    def transport(self) -> BusTransport:
        return self._transport

    @property
    def default_timer_period(self) -> float:
        return self._config.default_timer_period

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    # =========================================================================
    # Joint groups
    # =========================================================================

    def group_joints(self, group_name: str) -> tuple[str, ...]:
        """Joint names of a group, or of a single joint addressed by name.

        Raises:
            InvalidGroupError: If neither a group nor a joint has that name
        """
        groups = self.profile.groups
        if group_name in groups:
            return groups[group_name]
        if group_name in self.profile.joints:
            return (group_name,)
        raise InvalidGroupError(
            f"'{group_name}' is not a joint group or joint of {self.profile.model}. "
            f"Groups: {sorted(groups)}, joints: {list(self.profile.joints)}"
        )

    # =========================================================================
    # Bus access (shared by arm and gripper)
    # =========================================================================

    def set_operating_profile(self, group_name: str, moving_time: float, accel_time: float) -> bool:
        joints = self.group_joints(group_name)
        return self._transport.write_operating_profile(joints, moving_time, accel_time)

    def write_group(self, group_name: str, positions: Sequence[float]) -> bool:
        joints = self.group_joints(group_name)
        if len(positions) != len(joints):
            raise ValueError(
                f"Group '{group_name}' has {len(joints)} joints, got {len(positions)} positions"
            )
        return self._transport.write_positions(joints, positions)

    def write_joint(self, joint_name: str, position: float) -> bool:
        return self._transport.write_positions((joint_name,), (position,))

    def write_effort(self, joint_name: str, effort: float) -> bool:
        return self._transport.write_effort(joint_name, effort)

    def read_group(self, group_name: str) -> list[float]:
        return self._transport.read_positions(self.group_joints(group_name))

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def shutdown(self) -> None:
        """Tear down every remaining timer and release the bus. Safe to call twice."""
        with self._shutdown_lock:
            if self._is_shutdown:
                return
            self._is_shutdown = True

        for task in self.timers.all():
            try:
                self.timers.destroy(task)
            except Exception as e:
                logger.error(f"Error destroying timer '{task.name}' on shutdown: {e}")

        try:
            self._transport.disconnect()
        except Exception as e:
            logger.error(f"Error disconnecting {self.namespace}: {e}")
        logger.info(f"RobotCore {self.namespace} shut down")


__all__ = ["RobotCore"]
