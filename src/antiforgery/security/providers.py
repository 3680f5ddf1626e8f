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
"""Expected-token providers — where the gate gets the token it expects.

The verification engine is the same for both gate variants; only the
provider differs:

* :class:`CookieTokenProvider` recovers the token from the encrypted
  cookie and mints (and stores) a new one on the issuance endpoint.
* :class:`DelegatedTokenProvider` asks an application function.

Each provider also owns its variant's Origin/Referer rule.
"""

from __future__ import annotations

from typing import Protocol, cast, runtime_checkable

from antiforgery.security.codec import CookieTokenCodec
from antiforgery.security.options import (
    AntiForgeryOptions,
    CookieTokenOptions,
    DelegatedTokenOptions,
    ExpectedTokenExtractor,
    TokenFactory,
)
from antiforgery.security.origin import OriginValidator, check_origin_signal, check_secure_referer
from antiforgery.security.protector import CookieProtector
from antiforgery.security.request import RequestContext
from antiforgery.security.verdict import Deny, IssueToken, TokenCookie


@runtime_checkable
class ExpectedTokenProvider(Protocol):
    """Port implemented by both gate variants."""

    @property
    def source_name(self) -> str:
        """Name of the token source, used in the issuance-failure message."""
        ...

    def expected_token(self, request: RequestContext) -> str | None:
        """The token the caller must present, or ``None``. Never mints."""
        ...

    def issue_token(self, request: RequestContext) -> IssueToken | None:
        """Answer for the issuance endpoint, or ``None`` when no token is available."""
        ...

    def check_origin(self, request: RequestContext) -> Deny | None:
        """This variant's Origin/Referer rule."""
        ...


class CookieTokenProvider:
    """Double-submit cookie: the expected token is kept in an encrypted cookie."""

    source_name = "token_factory"

    def __init__(
        self,
        cookie_name: str,
        codec: CookieTokenCodec,
        token_factory: TokenFactory,
        origin_validator: OriginValidator | None = None,
    ) -> None:
        self._cookie_name = cookie_name
        self._codec = codec
        self._token_factory = token_factory
        self._origin_validator = origin_validator

    def expected_token(self, request: RequestContext) -> str | None:
        return self._codec.decode(request.cookie(self._cookie_name))

    def issue_token(self, request: RequestContext) -> IssueToken | None:
        # Reuse a readable cookie so repeated issuance is stable for a client.
        token = self.expected_token(request) or self._token_factory()
        if not token:
            return None
        cookie = TokenCookie(
            name=self._cookie_name,
            value=self._codec.encode(token),
            secure=request.is_secure,
        )
        return IssueToken(token, cookie)

    def check_origin(self, request: RequestContext) -> Deny | None:
        return check_origin_signal(request, self._origin_validator)


class DelegatedTokenProvider:
    """The application computes the expected token (e.g. from its session)."""

    source_name = "expected_token_extractor"

    def __init__(self, extractor: ExpectedTokenExtractor, referer_required: bool = True) -> None:
        self._extractor = extractor
        self._referer_required = referer_required

    def expected_token(self, request: RequestContext) -> str | None:
        return self._extractor(request) or None

    def issue_token(self, request: RequestContext) -> IssueToken | None:
        token = self.expected_token(request)
        return IssueToken(token) if token else None

    def check_origin(self, request: RequestContext) -> Deny | None:
        return check_secure_referer(request, self._referer_required)


def build_provider(options: AntiForgeryOptions) -> ExpectedTokenProvider:
    """Create the provider matching the variant of *options*.

    Raises:
        ConfigurationException: *options* is missing a required capability.
    """
    options.validate()
    if isinstance(options, CookieTokenOptions):
        return CookieTokenProvider(
            cookie_name=options.cookie_name,
            codec=CookieTokenCodec(cast(CookieProtector, options.cookie_protector)),
            token_factory=cast(TokenFactory, options.token_factory),
            origin_validator=options.origin_validator,
        )
    if isinstance(options, DelegatedTokenOptions):
        return DelegatedTokenProvider(
            extractor=cast(ExpectedTokenExtractor, options.expected_token_extractor),
            referer_required=options.referer_required,
        )
    raise TypeError(
        f"Unsupported options type {type(options).__name__}; "
        "use CookieTokenOptions or DelegatedTokenOptions"
    )
