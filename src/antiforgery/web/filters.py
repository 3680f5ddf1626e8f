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
"""OncePerRequestFilter — base class for WebFilter with path-glob scoping.

Only ``request.url.path`` is read, by attribute, so this module stays
free of Starlette imports.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable
from fnmatch import fnmatch
from typing import Any

from antiforgery.web.ports.filter import CallNext


def _any_match(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch(path, p) for p in patterns)


class OncePerRequestFilter(abc.ABC):
    """Abstract base class for :class:`WebFilter` implementations.

    Patterns come from class attributes or, per instance, from the
    constructor.

    Attributes:
        url_patterns: Globs the filter is scoped to; empty means every path.
        exclude_patterns: Globs skipped even when ``url_patterns`` match.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def __init__(
        self,
        url_patterns: Iterable[str] | None = None,
        exclude_patterns: Iterable[str] | None = None,
    ) -> None:
        if url_patterns is not None:
            self.url_patterns = list(url_patterns)
        if exclude_patterns is not None:
            self.exclude_patterns = list(exclude_patterns)

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` when the request path is out of this filter's scope."""
        path: str = request.url.path
        if self.url_patterns and not _any_match(path, self.url_patterns):
            return True
        return _any_match(path, self.exclude_patterns)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Run the filter. Call ``await call_next(request)`` to continue the chain."""
        ...
