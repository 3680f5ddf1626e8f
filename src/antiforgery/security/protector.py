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
"""Cookie protectors — encrypt/decrypt capability for the token cookie.

The gate composes a protector, it does not implement cryptography. Any
object with ``protect``/``unprotect`` over bytes satisfies
:class:`CookieProtector`; :class:`FernetCookieProtector` is the bundled
implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from antiforgery.kernel.exceptions import TokenProtectionException


@runtime_checkable
class CookieProtector(Protocol):
    """Port for authenticated encryption of opaque payloads.

    Implementations must be safe to call concurrently and must raise
    :class:`TokenProtectionException` (or ``ValueError``) when a payload
    cannot be unprotected.
    """

    def protect(self, data: bytes) -> bytes: ...
    def unprotect(self, data: bytes) -> bytes: ...


class FernetCookieProtector:
    """Fernet (AES-128-CBC + HMAC-SHA256) protector with key rotation.

    The first key encrypts; every key is tried on decrypt, so old cookies
    keep validating while a new key is rolled out.
    """

    def __init__(self, keys: Sequence[str | bytes]) -> None:
        if not keys:
            raise ValueError("FernetCookieProtector requires at least one key")
        self._fernet = MultiFernet([Fernet(k) for k in keys])

    @classmethod
    def generate(cls) -> FernetCookieProtector:
        """Protector with a fresh random key (tokens die with the process)."""
        return cls([Fernet.generate_key()])

    def protect(self, data: bytes) -> bytes:
        return self._fernet.encrypt(data)

    def unprotect(self, data: bytes) -> bytes:
        try:
            return self._fernet.decrypt(data)
        except InvalidToken as exc:
            raise TokenProtectionException("Cookie payload failed authentication") from exc
