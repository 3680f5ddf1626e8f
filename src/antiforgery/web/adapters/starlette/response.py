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
"""Verdict → Starlette response."""

from __future__ import annotations

from starlette.responses import PlainTextResponse, Response

from antiforgery.security.verdict import Deny, IssueToken, TokenCookie, Verdict


def materialize(verdict: Verdict, failure_status_code: int) -> Response | None:
    """Response for *verdict*, or ``None`` for ``Allow`` (continue the chain).

    * ``IssueToken`` — 200 with the raw token as body; sets the token cookie
      when the verdict carries one.
    * ``Deny`` — *failure_status_code* with the denial message as body.
    """
    if isinstance(verdict, IssueToken):
        response = PlainTextResponse(verdict.token)
        if verdict.cookie is not None:
            set_token_cookie(response, verdict.cookie)
        return response
    if isinstance(verdict, Deny):
        return PlainTextResponse(verdict.message, status_code=failure_status_code)
    return None


def set_token_cookie(response: Response, cookie: TokenCookie) -> None:
    """Append the session cookie holding the protected token."""
    response.set_cookie(
        key=cookie.name,
        value=cookie.value,
        path=cookie.path,
        secure=cookie.secure,
        httponly=cookie.httponly,
        samesite=None,
    )


def vary_on_cookie(response: Response) -> None:
    """Append ``Vary: Cookie``; existing ``Vary`` values are kept."""
    response.headers.append("Vary", "Cookie")
