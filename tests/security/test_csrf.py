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
"""Tests for CSRF token generation and comparison."""

from __future__ import annotations

from antiforgery.security.csrf import generate_csrf_token, tokens_match


class TestGenerateCsrfToken:
    def test_generates_url_safe_string(self) -> None:
        token = generate_csrf_token()
        assert isinstance(token, str)
        assert len(token) == 43
        assert set(token) <= set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_")

    def test_tokens_are_unique(self) -> None:
        assert generate_csrf_token() != generate_csrf_token()


class TestTokensMatch:
    def test_matching(self) -> None:
        token = generate_csrf_token()
        assert tokens_match(token, token) is True

    def test_mismatch(self) -> None:
        assert tokens_match("wrongtoken", "correcttoken") is False

    def test_comparison_is_case_sensitive(self) -> None:
        assert tokens_match("AAAA", "aaaa") is False

    def test_prefix_is_not_a_match(self) -> None:
        assert tokens_match("correct", "correcttoken") is False

    def test_non_ascii_tokens_compare_by_value(self) -> None:
        assert tokens_match("jeton-é", "jeton-é") is True
        assert tokens_match("jeton-é", "jeton-e") is False
