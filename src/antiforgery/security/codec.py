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
"""CookieTokenCodec — turns an expected token into a cookie value and back."""

from __future__ import annotations

import base64
import binascii
import logging

from antiforgery.kernel.exceptions import TokenProtectionException
from antiforgery.security.protector import CookieProtector

logger = logging.getLogger(__name__)


class CookieTokenCodec:
    """Encrypts the expected token for storage in a cookie.

    Cookie values are unpadded URL-safe base64 of the protected UTF-8
    token, so they never need quoting in a ``Set-Cookie`` header.

    Decoding never raises: malformed base64, a payload the protector
    rejects, or bytes that are not UTF-8 all decode to ``None``, the
    same answer as "no cookie yet".
    """

    def __init__(self, protector: CookieProtector) -> None:
        self._protector = protector

    def encode(self, token: str) -> str:
        protected = self._protector.protect(token.encode("utf-8"))
        return base64.urlsafe_b64encode(protected).decode("ascii").rstrip("=")

    def decode(self, cookie_value: str | None) -> str | None:
        if not cookie_value:
            return None
        try:
            padded = cookie_value + "=" * (-len(cookie_value) % 4)
            protected = base64.urlsafe_b64decode(padded.encode("ascii"))
            token = self._protector.unprotect(protected).decode("utf-8")
        except (binascii.Error, ValueError, TokenProtectionException):
            # UnicodeError is a ValueError; the value itself is never logged.
            logger.debug("Ignoring unreadable anti-forgery cookie")
            return None
        return token or None
