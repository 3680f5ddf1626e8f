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
"""RequestContext — framework-agnostic view of one inbound request.

Web adapters build a :class:`RequestContext` from their native request
type so that the verification engine never imports a web framework.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

# Returns every value submitted for a form field, in body order.
# Reading the body is the only I/O the engine ever waits on.
FormReader = Callable[[str], Awaitable[list[str]]]


@dataclass(frozen=True)
class RequestContext:
    """The request attributes the gate decides on.

    Attributes:
        method: HTTP method, compared case-sensitively.
        path: Request path, compared exactly.
        is_secure: Whether the request arrived over TLS.
        headers: Request headers; looked up case-insensitively.
        cookies: Parsed request cookies.
        authentication_schemes: Schemes of the caller's identities, resolved upstream.
        content_type: Raw ``Content-Type`` header value, if any.
        form_reader: Lazy accessor for form fields; ``None`` when the body cannot be read.
        raw: The adapter's native request, for delegated token extractors.
    """

    method: str
    path: str
    is_secure: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    authentication_schemes: frozenset[str] = frozenset()
    content_type: str | None = None
    form_reader: FormReader | None = field(default=None, repr=False)
    raw: Any = field(default=None, repr=False, compare=False)

    def header(self, name: str) -> str:
        """Return the header value for *name*, or ``""`` when absent."""
        value = self.headers.get(name)
        if value is None:
            lowered = name.lower()
            value = next((v for k, v in self.headers.items() if k.lower() == lowered), None)
        return value or ""

    def cookie(self, name: str) -> str:
        """Return the cookie value for *name*, or ``""`` when absent."""
        return self.cookies.get(name) or ""

    @property
    def media_type(self) -> str:
        """Content type without parameters, lower-cased."""
        if not self.content_type:
            return ""
        return self.content_type.split(";", 1)[0].strip().lower()

    async def form_values(self, name: str) -> list[str]:
        """Return the values submitted for form field *name*."""
        if self.form_reader is None:
            return []
        return await self.form_reader(name)
