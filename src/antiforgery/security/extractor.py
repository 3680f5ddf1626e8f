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
"""TokenExtractor — finds the token the caller presented."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from antiforgery.security.request import RequestContext


@dataclass(frozen=True)
class TokenLookup:
    """Result of a token lookup.

    ``location`` names the last place searched (``"X-CSRF-Token header"``
    or ``"form field csrf_token"``) and ends up in the denial message when
    ``token`` is ``None``.
    """

    token: str | None
    location: str

    def __repr__(self) -> str:
        return f"TokenLookup(found={self.token is not None}, location={self.location!r})"


class TokenExtractor:
    """Header first; form field only for form-encoded bodies without the header."""

    def __init__(self, header_name: str, form_field_name: str, form_content_types: Iterable[str]) -> None:
        self._header_name = header_name
        self._form_field_name = form_field_name
        self._form_content_types = frozenset(t.lower() for t in form_content_types)

    async def extract(self, request: RequestContext) -> TokenLookup:
        token = request.header(self._header_name)
        if token:
            return TokenLookup(token, f"{self._header_name} header")

        if request.media_type not in self._form_content_types:
            return TokenLookup(None, f"{self._header_name} header")

        location = f"form field {self._form_field_name}"
        values = await request.form_values(self._form_field_name)
        if not values or not values[0]:
            return TokenLookup(None, location)
        return TokenLookup(values[0], location)
