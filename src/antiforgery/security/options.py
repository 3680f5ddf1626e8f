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
"""Gate options — immutable, validated once when the engine is built.

:class:`CookieTokenOptions` configures the self-issuing gate (expected
token kept in an encrypted cookie); :class:`DelegatedTokenOptions`
configures the gate whose expected token comes from an application
function. Both share :class:`AntiForgeryOptions`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from antiforgery.kernel.exceptions import ConfigurationException
from antiforgery.security.csrf import generate_csrf_token
from antiforgery.security.origin import OriginValidator, trusted_origins
from antiforgery.security.protector import CookieProtector, FernetCookieProtector
from antiforgery.security.request import RequestContext

if TYPE_CHECKING:
    from antiforgery.config.properties.antiforgery import AntiForgeryProperties

TokenFactory = Callable[[], str | None]
ExpectedTokenExtractor = Callable[[RequestContext], str | None]


class Defaults:
    """Default option values."""

    TOKEN_ENDPOINT: str = "/auth/token"
    FAILURE_STATUS_CODE: int = 400
    HEADER_NAME: str = "X-CSRF-Token"
    FORM_FIELD_NAME: str = "csrf_token"
    FORM_CONTENT_TYPES: frozenset[str] = frozenset(
        {"application/x-www-form-urlencoded", "multipart/form-data"}
    )
    SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})
    COOKIE_NAME: str = "CSRF"
    REFERER_REQUIRED: bool = True


_SET_FIELDS = ("form_content_types", "safe_methods", "safe_paths", "safe_authentication_schemes")


@dataclass(frozen=True)
class AntiForgeryOptions:
    """Options shared by both gate variants."""

    token_endpoint: str = Defaults.TOKEN_ENDPOINT
    failure_status_code: int = Defaults.FAILURE_STATUS_CODE
    header_name: str = Defaults.HEADER_NAME
    form_field_name: str = Defaults.FORM_FIELD_NAME
    form_content_types: frozenset[str] = Defaults.FORM_CONTENT_TYPES
    safe_methods: frozenset[str] = Defaults.SAFE_METHODS
    safe_paths: frozenset[str] = frozenset()
    safe_authentication_schemes: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Accept any iterable (list from YAML, tuple, set); store frozensets.
        for name in _SET_FIELDS:
            value = getattr(self, name)
            object.__setattr__(self, name, frozenset(value or ()))

    def validate(self) -> None:
        """Raise :class:`ConfigurationException` for a missing or invalid option."""
        if not self.header_name:
            raise ConfigurationException("header_name")
        if not self.form_field_name:
            raise ConfigurationException("form_field_name")
        if not self.token_endpoint:
            raise ConfigurationException("token_endpoint")
        if not 100 <= self.failure_status_code <= 599:
            raise ConfigurationException(
                "failure_status_code",
                f"failure_status_code must be an HTTP status code, got {self.failure_status_code}",
            )

    @staticmethod
    def _shared_kwargs(properties: AntiForgeryProperties) -> dict[str, Any]:
        shared = {f.name for f in fields(AntiForgeryOptions)}
        return {name: getattr(properties, name) for name in shared}


@dataclass(frozen=True)
class CookieTokenOptions(AntiForgeryOptions):
    """Self-issuing gate: the expected token lives in an encrypted cookie.

    Attributes:
        cookie_name: Name of the cookie carrying the protected token.
        cookie_protector: Encrypt/decrypt capability; required.
        token_factory: Mints a new token on the issuance endpoint.
        origin_validator: Optional predicate over the parsed Origin/Referer URI.
    """

    cookie_name: str = Defaults.COOKIE_NAME
    cookie_protector: CookieProtector | None = field(default=None, repr=False)
    token_factory: TokenFactory | None = field(default=generate_csrf_token, repr=False)
    origin_validator: OriginValidator | None = field(default=None, repr=False)

    def validate(self) -> None:
        super().validate()
        if not self.cookie_name:
            raise ConfigurationException("cookie_name")
        if self.cookie_protector is None:
            raise ConfigurationException("cookie_protector")
        if self.token_factory is None:
            raise ConfigurationException("token_factory")

    @classmethod
    def from_properties(
        cls,
        properties: AntiForgeryProperties,
        *,
        cookie_protector: CookieProtector | None = None,
        token_factory: TokenFactory | None = generate_csrf_token,
        origin_validator: OriginValidator | None = None,
    ) -> CookieTokenOptions:
        """Build options from bound properties plus injected capabilities.

        ``cookie_keys`` yields a :class:`FernetCookieProtector` and
        ``trusted_origins`` an origin validator when the matching
        capability is not passed explicitly.
        """
        if cookie_protector is None and properties.cookie_keys:
            cookie_protector = FernetCookieProtector(properties.cookie_keys)
        if origin_validator is None and properties.trusted_origins:
            origin_validator = trusted_origins(properties.trusted_origins)
        return cls(
            **cls._shared_kwargs(properties),
            cookie_name=properties.cookie_name,
            cookie_protector=cookie_protector,
            token_factory=token_factory,
            origin_validator=origin_validator,
        )


@dataclass(frozen=True)
class DelegatedTokenOptions(AntiForgeryOptions):
    """Delegated gate: the expected token is computed per request.

    Attributes:
        expected_token_extractor: Derives the expected token from the request
            (typically from the session); required.
        referer_required: Whether TLS requests must carry a ``Referer`` header.
    """

    expected_token_extractor: ExpectedTokenExtractor | None = field(default=None, repr=False)
    referer_required: bool = Defaults.REFERER_REQUIRED

    def validate(self) -> None:
        super().validate()
        if self.expected_token_extractor is None:
            raise ConfigurationException("expected_token_extractor")

    @classmethod
    def from_properties(
        cls,
        properties: AntiForgeryProperties,
        *,
        expected_token_extractor: ExpectedTokenExtractor | None,
    ) -> DelegatedTokenOptions:
        return cls(
            **cls._shared_kwargs(properties),
            expected_token_extractor=expected_token_extractor,
            referer_required=properties.referer_required,
        )
