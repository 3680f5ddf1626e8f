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
"""Starlette wiring helpers for the anti-forgery gate."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from starlette.middleware import Middleware

from antiforgery.config.properties import AntiForgeryProperties
from antiforgery.core.config import Config
from antiforgery.logging.port import LoggingPort
from antiforgery.logging.structlog_adapter import StructlogAdapter
from antiforgery.security.csrf import generate_csrf_token
from antiforgery.security.options import (
    AntiForgeryOptions,
    CookieTokenOptions,
    DelegatedTokenOptions,
    ExpectedTokenExtractor,
    TokenFactory,
)
from antiforgery.security.origin import OriginValidator
from antiforgery.security.protector import CookieProtector
from antiforgery.security.providers import ExpectedTokenProvider
from antiforgery.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from antiforgery.web.adapters.starlette.filters.csrf_filter import AntiForgeryFilter
from antiforgery.web.ports.filter import WebFilter

logger = logging.getLogger(__name__)


def antiforgery_middleware(
    options: AntiForgeryOptions,
    *,
    provider: ExpectedTokenProvider | None = None,
    before: Sequence[WebFilter] = (),
    after: Sequence[WebFilter] = (),
) -> Middleware:
    """``Middleware`` entry running the gate inside a filter chain.

    *before* filters run ahead of the gate (authentication filters that set
    ``request.state.security_context`` belong here); *after* filters run
    only for requests the gate allowed.

    Usage::

        app = Starlette(
            routes=routes,
            middleware=[antiforgery_middleware(CookieTokenOptions(cookie_protector=protector))],
        )
    """
    gate = AntiForgeryFilter(options, provider)
    return Middleware(WebFilterChainMiddleware, filters=[*before, gate, *after])


def antiforgery_middleware_from_config(
    config: Config,
    *,
    expected_token_extractor: ExpectedTokenExtractor | None = None,
    cookie_protector: CookieProtector | None = None,
    token_factory: TokenFactory | None = generate_csrf_token,
    origin_validator: OriginValidator | None = None,
    logging_port: LoggingPort | None = None,
    before: Sequence[WebFilter] = (),
    after: Sequence[WebFilter] = (),
) -> Middleware:
    """Wire the gate from the ``antiforgery`` configuration section.

    Logging is configured first through *logging_port* (a
    :class:`StructlogAdapter` by default). Passing
    *expected_token_extractor* selects the delegated gate; otherwise the
    cookie-backed gate is built, with its protector taken from
    *cookie_protector* or ``antiforgery.cookie_keys``.

    Raises:
        ConfigurationException: The bound options are incomplete or invalid.
    """
    port = logging_port if logging_port is not None else StructlogAdapter()
    port.configure(config)

    properties = config.bind(AntiForgeryProperties)
    options: AntiForgeryOptions
    if expected_token_extractor is not None:
        options = DelegatedTokenOptions.from_properties(
            properties, expected_token_extractor=expected_token_extractor
        )
    else:
        options = CookieTokenOptions.from_properties(
            properties,
            cookie_protector=cookie_protector,
            token_factory=token_factory,
            origin_validator=origin_validator,
        )

    middleware = antiforgery_middleware(options, before=before, after=after)
    logger.info(
        "Anti-forgery gate configured: %s, token endpoint %s",
        type(options).__name__,
        options.token_endpoint,
    )
    return middleware
