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

"""Actuator bus transports.

Example:
    >>> from xsmanip.hardware.bus import transport_registry
    >>> bus = transport_registry.create("mock", joint_names=["waist", "shoulder"])
    >>> bus.connect()
    True
"""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submod_attrs={
        "registry": [
            "TransportRegistry",
            "init_node",
            "is_node_initialized",
            "transport_registry",
        ],
        "spec": ["BusTransport"],
    },
)
