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
"""Verdicts — the engine's per-request decision.

A verdict is one of :class:`Allow`, :class:`IssueToken` or :class:`Deny`.
Denials carry a :class:`DenyReason` and the literal message written to
the response body.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Response messages
# ---------------------------------------------------------------------------
MISSING_ORIGIN_MESSAGE = "Origin and Referer request headers are both absent/empty"
UNTRUSTED_ORIGIN_MESSAGE = "Invalid Origin or Referer request header value"
MISSING_SECURE_REFERER_MESSAGE = "Referer missing in secure request"
EXPECTED_TOKEN_UNAVAILABLE_MESSAGE = "Could not extract expected anti-forgery token"
TOKEN_MISMATCH_MESSAGE = "Invalid anti-forgery token"


class DenyReason(enum.Enum):
    """Why a request was denied. All reasons share one failure status code."""

    MISSING_ORIGIN_SIGNAL = "missing_origin_signal"
    UNTRUSTED_ORIGIN = "untrusted_origin"
    TOKEN_ABSENT = "token_absent"
    EXPECTED_TOKEN_UNAVAILABLE = "expected_token_unavailable"
    TOKEN_FACTORY_FAILED = "token_factory_failed"
    TOKEN_MISMATCH = "token_mismatch"


@dataclass(frozen=True)
class TokenCookie:
    """Cookie to append when a token is issued (cookie-backed gate only).

    Always ``HttpOnly``, path ``/``, no expiry; ``secure`` mirrors the
    request's TLS flag.
    """

    name: str
    value: str
    secure: bool = False
    path: str = "/"
    httponly: bool = True


@dataclass(frozen=True)
class Allow:
    """Continue to the next handler."""


@dataclass(frozen=True)
class IssueToken:
    """Answer the issuance endpoint with *token* as the raw response body."""

    token: str
    cookie: TokenCookie | None = None

    def __repr__(self) -> str:
        return f"IssueToken(token=<redacted>, cookie={'set' if self.cookie else None})"


@dataclass(frozen=True)
class Deny:
    """Reject the request with the configured failure status code."""

    reason: DenyReason
    message: str


Verdict = Allow | IssueToken | Deny

ALLOW = Allow()


def token_absent(location: str) -> Deny:
    """Denial for a request whose token was not found at *location*."""
    return Deny(DenyReason.TOKEN_ABSENT, f"No anti-forgery token found in {location}")


def token_factory_failed(factory_name: str) -> Deny:
    """Denial for an issuance request whose token source produced nothing."""
    return Deny(DenyReason.TOKEN_FACTORY_FAILED, f"{factory_name} did not return a token")
