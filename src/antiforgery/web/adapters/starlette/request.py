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
"""Starlette request → :class:`RequestContext`."""

from __future__ import annotations

import logging

from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from antiforgery.security.context import SecurityContext
from antiforgery.security.request import FormReader, RequestContext

logger = logging.getLogger(__name__)

_SECURE_SCHEMES = frozenset({"https", "wss"})


def to_request_context(request: Request) -> RequestContext:
    """Build the engine's view of *request*.

    Authentication schemes come from ``request.state.security_context``
    when an upstream filter has set one.
    """
    security_context = getattr(request.state, "security_context", None)
    schemes: frozenset[str] = frozenset()
    if isinstance(security_context, SecurityContext):
        schemes = frozenset(security_context.authentication_schemes)

    return RequestContext(
        method=request.method,
        path=request.url.path,
        is_secure=request.url.scheme in _SECURE_SCHEMES,
        headers=request.headers,
        cookies=request.cookies,
        authentication_schemes=schemes,
        content_type=request.headers.get("content-type"),
        form_reader=_form_reader(request),
        raw=request,
    )


def _form_reader(request: Request) -> FormReader:
    async def _read(name: str) -> list[str]:
        # Cache the raw body first so WebFilterChainMiddleware can replay it.
        await request.body()
        try:
            form = await request.form()
        except (MultiPartException, HTTPException):
            # Unparseable body (e.g. multipart without boundary): no form fields.
            logger.debug("Form body could not be parsed: %s %s", request.method, request.url.path)
            return []
        return [value for value in form.getlist(name) if isinstance(value, str)]

    return _read
