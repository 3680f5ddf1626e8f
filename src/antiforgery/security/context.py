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
"""Security context for the caller identity resolved upstream."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SecurityContext:
    """Who the caller is, as resolved by authentication running before the gate.

    Authentication filters store it on ``request.state.security_context``.
    The gate reads only ``authentication_schemes``: one entry per identity
    the caller authenticated with (e.g. ``"jwt"``, ``"cookie"``).
    """

    user_id: str | None = None
    authentication_schemes: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_authenticated(self) -> bool:
        """Whether the caller is authenticated."""
        return self.user_id is not None

    def authenticated_with(self, scheme: str) -> bool:
        """Check whether one of the caller's identities used *scheme*."""
        return scheme in self.authentication_schemes

    @classmethod
    def anonymous(cls) -> SecurityContext:
        """Create an anonymous (unauthenticated) security context."""
        return cls()
