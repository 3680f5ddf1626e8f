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
"""RequestClassifier — decides which requests skip verification."""

from __future__ import annotations

from collections.abc import Iterable

from antiforgery.security.request import RequestContext


class RequestClassifier:
    """Bypass rules, evaluated in order; the first match wins.

    1. Safe method (exact, case-sensitive).
    2. Safe path (exact match, not a prefix).
    3. Any of the caller's authentication schemes is a safe scheme.
    """

    def __init__(
        self,
        safe_methods: Iterable[str] = (),
        safe_paths: Iterable[str] = (),
        safe_authentication_schemes: Iterable[str] = (),
    ) -> None:
        self._safe_methods = frozenset(safe_methods)
        self._safe_paths = frozenset(safe_paths)
        self._safe_schemes = frozenset(safe_authentication_schemes)

    def bypass_reason(self, request: RequestContext) -> str | None:
        """Name of the first matching bypass rule, or ``None``."""
        if request.method in self._safe_methods:
            return "safe_method"
        if request.path in self._safe_paths:
            return "safe_path"
        if self._safe_schemes and not self._safe_schemes.isdisjoint(request.authentication_schemes):
            return "safe_authentication_scheme"
        return None

    def is_bypassed(self, request: RequestContext) -> bool:
        return self.bypass_reason(request) is not None
