# Copyright 2026 Firefly Software Solutions Inc.
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
"""LoggingPort — how the gate's wiring sets up process-level logging.

``antiforgery_middleware_from_config`` configures logging through this
port before it builds the gate. :class:`StructlogAdapter` is the default
implementation; an application with its own logging setup passes an
adapter that satisfies the same three methods.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from antiforgery.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Logging setup contract, driven by the ``antiforgery.logging`` section."""

    def configure(self, config: Config) -> None:
        """Apply format and levels from *config*."""
        ...

    def get_logger(self, name: str) -> Any:
        """Logger bound to *name*."""
        ...

    def set_level(self, name: str, level: str) -> None:
        """Change the level of logger *name* at runtime."""
        ...
