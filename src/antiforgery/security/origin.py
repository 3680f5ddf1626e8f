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
"""Origin/Referer checks for requests that reach full verification.

Two rules exist, one per gate variant:

* :func:`check_origin_signal` (cookie-backed) — every verified request
  must carry ``Origin`` or ``Referer``; an optional validator decides
  whether that URI is trusted.
* :func:`check_secure_referer` (delegated) — only TLS requests must
  carry ``Referer``; plain-HTTP requests are not checked.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from urllib.parse import SplitResult, urlsplit

from antiforgery.security.request import RequestContext
from antiforgery.security.verdict import (
    MISSING_ORIGIN_MESSAGE,
    MISSING_SECURE_REFERER_MESSAGE,
    UNTRUSTED_ORIGIN_MESSAGE,
    Deny,
    DenyReason,
)

OriginValidator = Callable[[SplitResult], bool]


def parse_origin(value: str) -> SplitResult | None:
    """Parse an Origin/Referer value as an absolute URI, or ``None``."""
    try:
        parsed = urlsplit(value.strip())
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed


def check_origin_signal(request: RequestContext, validator: OriginValidator | None) -> Deny | None:
    """Require ``Origin`` (or, failing that, ``Referer``) and optionally validate it."""
    source = request.header("Origin") or request.header("Referer")
    if not source:
        return Deny(DenyReason.MISSING_ORIGIN_SIGNAL, MISSING_ORIGIN_MESSAGE)

    if validator is not None:
        parsed = parse_origin(source)
        if parsed is None or not validator(parsed):
            return Deny(DenyReason.UNTRUSTED_ORIGIN, UNTRUSTED_ORIGIN_MESSAGE)

    return None


def check_secure_referer(request: RequestContext, referer_required: bool) -> Deny | None:
    """Require ``Referer`` on TLS requests when *referer_required* is set."""
    if referer_required and request.is_secure and not request.header("Referer"):
        return Deny(DenyReason.MISSING_ORIGIN_SIGNAL, MISSING_SECURE_REFERER_MESSAGE)
    return None


def trusted_origins(origins: Iterable[str]) -> OriginValidator:
    """Build a validator accepting URIs whose scheme and host:port are listed.

    ``trusted_origins(["https://app.example.com"])`` accepts
    ``https://app.example.com/page`` and rejects ``http://app.example.com``
    or ``https://evil.example.com``.
    """
    allowed: set[tuple[str, str]] = set()
    for origin in origins:
        parsed = parse_origin(origin)
        if parsed is None:
            raise ValueError(f"Trusted origin '{origin}' is not an absolute URI")
        allowed.add((parsed.scheme.lower(), parsed.netloc.lower()))

    def _validate(uri: SplitResult) -> bool:
        return (uri.scheme.lower(), uri.netloc.lower()) in allowed

    return _validate
