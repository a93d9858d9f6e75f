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

"""Transport registry with auto-discovery.

Automatically discovers and registers bus transports from subpackages.
Each transport provides a `register()` function in its adapter.py module.

Usage:
    from xsmanip.hardware.bus.registry import transport_registry

    bus = transport_registry.create("mock", joint_names=["waist", "gripper"])
    print(transport_registry.available())  # ["mock"]
"""

from __future__ import annotations

import importlib
import os
import pkgutil
import threading
from typing import TYPE_CHECKING, Any

from xsmanip.utils.logging_config import setup_logger

if TYPE_CHECKING:
    from xsmanip.hardware.bus.spec import BusTransport

logger = setup_logger()

_node_lock = threading.Lock()
_node_initialized = False


def init_node() -> bool:
    """Process-wide transport initialization, performed at most once.

    Returns:
        True if this call performed the initialization
    """
    global _node_initialized

    with _node_lock:
        if _node_initialized:
            return False
        _node_initialized = True
    logger.info("Transport node initialized", pid=os.getpid())
    return True


def is_node_initialized() -> bool:
    with _node_lock:
        return _node_initialized


class TransportRegistry:
    """Registry for bus transports with auto-discovery."""

    def __init__(self) -> None:
        self._transports: dict[str, type[BusTransport]] = {}

    def register(self, name: str, cls: type[BusTransport]) -> None:
        """Register a transport class."""
        self._transports[name.lower()] = cls

    def create(self, name: str, **kwargs: Any) -> BusTransport:
        """Create a transport instance by name.

        Raises:
            KeyError: If transport name is not found
        """
        key = name.lower()
        if key not in self._transports:
            raise KeyError(f"Unknown transport: {name}. Available: {self.available()}")

        return self._transports[key](**kwargs)

    def available(self) -> list[str]:
        """List available transport names."""
        return sorted(self._transports.keys())

    def discover(self) -> None:
        """Discover and register transports from subpackages."""
        import xsmanip.hardware.bus as pkg

        for _, name, ispkg in pkgutil.iter_modules(pkg.__path__):
            if not ispkg:
                continue
            try:
                module = importlib.import_module(f"xsmanip.hardware.bus.{name}.adapter")
                if hasattr(module, "register"):
                    module.register(self)
            except ImportError as e:
                logger.debug(f"Skipping transport {name}: {e}")


transport_registry = TransportRegistry()
transport_registry.discover()

__all__ = [
    "TransportRegistry",
    "init_node",
    "is_node_initialized",
    "transport_registry",
]
