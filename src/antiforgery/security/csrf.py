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
"""CSRF token utilities — generation and comparison.

Provides the default token factory and the comparison used by the
verification engine.
"""

from __future__ import annotations

import secrets


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------
def generate_csrf_token() -> str:
    """Generate a cryptographically-secure CSRF token.

    This is the default ``token_factory`` of the cookie-backed gate.

    Returns:
        A URL-safe base64-encoded random string (43 characters).
    """
    return secrets.token_urlsafe(32)


def tokens_match(actual: str, expected: str) -> bool:
    """Compare a presented token with the expected one.

    The result is exactly ordinal string equality. The comparison runs on
    the UTF-8 encodings through :func:`secrets.compare_digest` so that
    non-ASCII tokens are accepted and timing does not depend on the
    position of the first differing character.

    Args:
        actual: The token presented by the caller (header or form field).
        expected: The token recovered from the cookie or the extractor.

    Returns:
        ``True`` if both tokens are equal; ``False`` otherwise.
    """
    return secrets.compare_digest(actual.encode("utf-8"), expected.encode("utf-8"))
