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
"""AntiForgeryFilter — runs the verification engine for every request.

* ``GET`` on the token endpoint answers with the expected token (and, for
  the cookie-backed gate, the encrypted token cookie).
* Safe methods, safe paths and safe authentication schemes pass through.
* Everything else must carry a trusted Origin/Referer and a token equal to
  the expected one, in the configured header or, for form posts, in the
  configured form field. Failures answer with the configured status code
  and a plain-text message.

Every response, allowed or not, gets ``Vary: Cookie``. Bypasses are
decided by the engine, never by path patterns on the filter, so bypassed
responses carry the header too.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from antiforgery.security.engine import VerificationEngine
from antiforgery.security.options import AntiForgeryOptions
from antiforgery.security.providers import ExpectedTokenProvider
from antiforgery.web.adapters.starlette.request import to_request_context
from antiforgery.web.adapters.starlette.response import materialize, vary_on_cookie
from antiforgery.web.filters import OncePerRequestFilter
from antiforgery.web.ports.filter import CallNext


class AntiForgeryFilter(OncePerRequestFilter):
    """CSRF gate as a web filter.

    Options are validated on construction, so a misconfigured filter
    fails at startup rather than on the first request.
    """

    def __init__(
        self,
        options: AntiForgeryOptions,
        provider: ExpectedTokenProvider | None = None,
    ) -> None:
        super().__init__()
        self._engine = VerificationEngine(options, provider)

    @property
    def engine(self) -> VerificationEngine:
        return self._engine

    def should_not_filter(self, request: Request) -> bool:
        return False

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        verdict = await self._engine.evaluate(to_request_context(request))

        response = materialize(verdict, self._engine.options.failure_status_code)
        if response is None:
            response = await call_next(request)

        vary_on_cookie(response)
        return response
