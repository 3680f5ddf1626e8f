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
"""Tests for VerificationEngine — the per-request decision."""

from __future__ import annotations

import itertools
from unittest.mock import MagicMock

import pytest

from antiforgery.security.codec import CookieTokenCodec
from antiforgery.security.engine import VerificationEngine
from antiforgery.kernel.exceptions import ConfigurationException
from antiforgery.security.options import AntiForgeryOptions, CookieTokenOptions, DelegatedTokenOptions
from antiforgery.security.protector import FernetCookieProtector
from antiforgery.security.providers import CookieTokenProvider, DelegatedTokenProvider, build_provider
from antiforgery.security.request import RequestContext
from antiforgery.security.verdict import Allow, Deny, DenyReason, IssueToken

_PROTECTOR = FernetCookieProtector.generate()
_CODEC = CookieTokenCodec(_PROTECTOR)
_ORIGIN = {"Origin": "https://app.example.com"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cookie_engine(**overrides) -> VerificationEngine:
    overrides.setdefault("cookie_protector", _PROTECTOR)
    return VerificationEngine(CookieTokenOptions(**overrides))


def _delegated_engine(expected: str | None, **overrides) -> VerificationEngine:
    return VerificationEngine(DelegatedTokenOptions(expected_token_extractor=lambda request: expected, **overrides))


def _request(
    method: str = "POST",
    path: str = "/test",
    headers: dict[str, str] | None = None,
    cookie_token: str | None = None,
    is_secure: bool = False,
    schemes: frozenset[str] = frozenset(),
    content_type: str | None = None,
    form: dict[str, list[str]] | None = None,
) -> RequestContext:
    cookies = {"CSRF": _CODEC.encode(cookie_token)} if cookie_token else {}
    fields = form or {}

    async def _reader(name: str) -> list[str]:
        return fields.get(name, [])

    return RequestContext(
        method=method,
        path=path,
        is_secure=is_secure,
        headers=headers or {},
        cookies=cookies,
        authentication_schemes=schemes,
        content_type=content_type,
        form_reader=_reader,
    )


# ---------------------------------------------------------------------------
# Token issuance
# ---------------------------------------------------------------------------


class TestCookieIssuance:
    @pytest.mark.asyncio
    async def test_issues_factory_token_with_cookie(self) -> None:
        engine = _cookie_engine(token_factory=lambda: "AAAA")
        verdict = await engine.evaluate(_request(method="GET", path="/auth/token"))
        assert isinstance(verdict, IssueToken)
        assert verdict.token == "AAAA"
        assert verdict.cookie is not None
        assert verdict.cookie.name == "CSRF"
        assert verdict.cookie.httponly is True
        assert verdict.cookie.path == "/"
        assert verdict.cookie.secure is False
        assert _CODEC.decode(verdict.cookie.value) == "AAAA"

    @pytest.mark.asyncio
    async def test_secure_flag_mirrors_tls(self) -> None:
        engine = _cookie_engine(token_factory=lambda: "AAAA")
        verdict = await engine.evaluate(_request(method="GET", path="/auth/token", is_secure=True))
        assert isinstance(verdict, IssueToken)
        assert verdict.cookie is not None
        assert verdict.cookie.secure is True

    @pytest.mark.asyncio
    async def test_custom_endpoint(self) -> None:
        engine = _cookie_engine(token_factory=lambda: "AAAA", token_endpoint="/fancyendpoint")
        verdict = await engine.evaluate(_request(method="GET", path="/fancyendpoint"))
        assert isinstance(verdict, IssueToken)

    @pytest.mark.asyncio
    async def test_without_cookie_each_issue_mints_a_new_token(self) -> None:
        counter = itertools.count()
        engine = _cookie_engine(token_factory=lambda: f"token-{next(counter)}")
        first = await engine.evaluate(_request(method="GET", path="/auth/token"))
        second = await engine.evaluate(_request(method="GET", path="/auth/token"))
        assert isinstance(first, IssueToken) and isinstance(second, IssueToken)
        assert first.token != second.token

    @pytest.mark.asyncio
    async def test_valid_cookie_is_reused_without_minting(self) -> None:
        factory = MagicMock(return_value="fresh")
        engine = _cookie_engine(token_factory=factory)
        verdict = await engine.evaluate(_request(method="GET", path="/auth/token", cookie_token="existing"))
        assert isinstance(verdict, IssueToken)
        assert verdict.token == "existing"
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_tampered_cookie_mints_new_token(self) -> None:
        engine = _cookie_engine(token_factory=lambda: "fresh")
        request = RequestContext(method="GET", path="/auth/token", cookies={"CSRF": "garbage"})
        verdict = await engine.evaluate(request)
        assert isinstance(verdict, IssueToken)
        assert verdict.token == "fresh"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("produced", [None, ""])
    async def test_empty_factory_result_denies(self, produced: str | None) -> None:
        engine = _cookie_engine(token_factory=lambda: produced)
        verdict = await engine.evaluate(_request(method="GET", path="/auth/token"))
        assert verdict == Deny(DenyReason.TOKEN_FACTORY_FAILED, "token_factory did not return a token")

    @pytest.mark.asyncio
    async def test_post_to_endpoint_is_verified_not_issued(self) -> None:
        engine = _cookie_engine(token_factory=lambda: "AAAA")
        verdict = await engine.evaluate(_request(method="POST", path="/auth/token", headers=_ORIGIN))
        assert isinstance(verdict, Deny)


class TestDelegatedIssuance:
    @pytest.mark.asyncio
    async def test_issues_extracted_token_without_cookie(self) -> None:
        verdict = await _delegated_engine("session-token").evaluate(_request(method="GET", path="/auth/token"))
        assert verdict == IssueToken("session-token")
        assert verdict.cookie is None

    @pytest.mark.asyncio
    async def test_empty_extractor_result_denies(self) -> None:
        verdict = await _delegated_engine(None).evaluate(_request(method="GET", path="/auth/token"))
        assert verdict == Deny(
            DenyReason.TOKEN_FACTORY_FAILED, "expected_token_extractor did not return a token"
        )


# ---------------------------------------------------------------------------
# Bypass rules
# ---------------------------------------------------------------------------


class TestBypass:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS", "TRACE"])
    async def test_safe_methods_allow_without_token(self, method: str) -> None:
        assert await _cookie_engine().evaluate(_request(method=method)) == Allow()

    @pytest.mark.asyncio
    async def test_safe_path_allows_any_method(self) -> None:
        engine = _cookie_engine(safe_paths=["/some/safe/path"])
        assert await engine.evaluate(_request(method="DELETE", path="/some/safe/path")) == Allow()

    @pytest.mark.asyncio
    async def test_safe_scheme_allows(self) -> None:
        engine = _cookie_engine(safe_authentication_schemes=["jwt"])
        assert await engine.evaluate(_request(schemes=frozenset({"jwt"}))) == Allow()

    @pytest.mark.asyncio
    async def test_other_scheme_is_verified(self) -> None:
        engine = _cookie_engine(safe_authentication_schemes=["cookie"])
        verdict = await engine.evaluate(_request(schemes=frozenset({"jwt"}), headers=_ORIGIN, cookie_token="t"))
        assert verdict == Deny(DenyReason.TOKEN_ABSENT, "No anti-forgery token found in X-CSRF-Token header")

    @pytest.mark.asyncio
    async def test_bypass_skips_origin_check(self) -> None:
        engine = _cookie_engine(safe_paths=["/hook"], origin_validator=lambda uri: False)
        assert await engine.evaluate(_request(path="/hook")) == Allow()


# ---------------------------------------------------------------------------
# Cookie-backed verification
# ---------------------------------------------------------------------------


class TestCookieVerification:
    @pytest.mark.asyncio
    async def test_matching_header_token_allows(self) -> None:
        request = _request(headers={**_ORIGIN, "X-CSRF-Token": "AAAA"}, cookie_token="AAAA")
        assert await _cookie_engine().evaluate(request) == Allow()

    @pytest.mark.asyncio
    async def test_referer_substitutes_for_origin(self) -> None:
        request = _request(headers={"Referer": "https://app.example.com/p", "X-CSRF-Token": "AAAA"}, cookie_token="AAAA")
        assert await _cookie_engine().evaluate(request) == Allow()

    @pytest.mark.asyncio
    async def test_missing_origin_and_referer_denies_before_token_checks(self) -> None:
        request = _request(headers={"X-CSRF-Token": "AAAA"}, cookie_token="AAAA", is_secure=True)
        verdict = await _cookie_engine().evaluate(request)
        assert verdict == Deny(
            DenyReason.MISSING_ORIGIN_SIGNAL, "Origin and Referer request headers are both absent/empty"
        )

    @pytest.mark.asyncio
    async def test_untrusted_origin_denies(self) -> None:
        engine = _cookie_engine(origin_validator=lambda uri: uri.netloc == "app.example.com")
        request = _request(headers={"Origin": "https://evil.example.com", "X-CSRF-Token": "AAAA"}, cookie_token="AAAA")
        verdict = await engine.evaluate(request)
        assert verdict == Deny(DenyReason.UNTRUSTED_ORIGIN, "Invalid Origin or Referer request header value")

    @pytest.mark.asyncio
    async def test_trusted_origin_allows(self) -> None:
        engine = _cookie_engine(origin_validator=lambda uri: uri.netloc == "app.example.com")
        request = _request(headers={**_ORIGIN, "X-CSRF-Token": "AAAA"}, cookie_token="AAAA")
        assert await engine.evaluate(request) == Allow()

    @pytest.mark.asyncio
    async def test_missing_cookie_denies_as_unavailable(self) -> None:
        factory = MagicMock(return_value="fresh")
        engine = _cookie_engine(token_factory=factory)
        verdict = await engine.evaluate(_request(headers={**_ORIGIN, "X-CSRF-Token": "AAAA"}))
        assert verdict == Deny(DenyReason.EXPECTED_TOKEN_UNAVAILABLE, "Could not extract expected anti-forgery token")
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_tampered_cookie_denies_as_unavailable(self) -> None:
        request = RequestContext(
            method="POST",
            path="/test",
            headers={**_ORIGIN, "X-CSRF-Token": "AAAA"},
            cookies={"CSRF": "not-a-real-cookie"},
        )
        verdict = await _cookie_engine().evaluate(request)
        assert isinstance(verdict, Deny)
        assert verdict.reason is DenyReason.EXPECTED_TOKEN_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_missing_header_denies_naming_header(self) -> None:
        verdict = await _cookie_engine().evaluate(_request(headers=_ORIGIN, cookie_token="AAAA"))
        assert verdict == Deny(DenyReason.TOKEN_ABSENT, "No anti-forgery token found in X-CSRF-Token header")

    @pytest.mark.asyncio
    async def test_custom_header_name_in_message(self) -> None:
        engine = _cookie_engine(header_name="blabla")
        verdict = await engine.evaluate(_request(headers=_ORIGIN, cookie_token="AAAA"))
        assert isinstance(verdict, Deny)
        assert verdict.message == "No anti-forgery token found in blabla header"

    @pytest.mark.asyncio
    async def test_mismatch_denies(self) -> None:
        request = _request(headers={**_ORIGIN, "X-CSRF-Token": "wrongtoken"}, cookie_token="correcttoken")
        verdict = await _cookie_engine().evaluate(request)
        assert verdict == Deny(DenyReason.TOKEN_MISMATCH, "Invalid anti-forgery token")

    @pytest.mark.asyncio
    async def test_matching_form_field_allows(self) -> None:
        request = _request(
            headers=_ORIGIN,
            cookie_token="AAAA",
            content_type="application/x-www-form-urlencoded",
            form={"csrf_token": ["AAAA"]},
        )
        assert await _cookie_engine().evaluate(request) == Allow()

    @pytest.mark.asyncio
    async def test_missing_form_field_denies_naming_field(self) -> None:
        request = _request(headers=_ORIGIN, cookie_token="AAAA", content_type="application/x-www-form-urlencoded")
        verdict = await _cookie_engine().evaluate(request)
        assert verdict == Deny(DenyReason.TOKEN_ABSENT, "No anti-forgery token found in form field csrf_token")

    @pytest.mark.asyncio
    async def test_mismatching_form_field_denies(self) -> None:
        request = _request(
            headers=_ORIGIN,
            cookie_token="correcttoken",
            content_type="application/x-www-form-urlencoded",
            form={"csrf_token": ["wrongtoken"]},
        )
        verdict = await _cookie_engine().evaluate(request)
        assert verdict == Deny(DenyReason.TOKEN_MISMATCH, "Invalid anti-forgery token")


# ---------------------------------------------------------------------------
# Delegated verification
# ---------------------------------------------------------------------------


class TestDelegatedVerification:
    @pytest.mark.asyncio
    async def test_plain_request_needs_no_origin(self) -> None:
        request = _request(headers={"X-CSRF-Token": "AAAA"})
        assert await _delegated_engine("AAAA").evaluate(request) == Allow()

    @pytest.mark.asyncio
    async def test_secure_request_without_referer_denies(self) -> None:
        request = _request(headers={"X-CSRF-Token": "AAAA"}, is_secure=True)
        verdict = await _delegated_engine("AAAA").evaluate(request)
        assert verdict == Deny(DenyReason.MISSING_ORIGIN_SIGNAL, "Referer missing in secure request")

    @pytest.mark.asyncio
    async def test_secure_request_with_referer_allows(self) -> None:
        request = _request(headers={"X-CSRF-Token": "AAAA", "Referer": "https://some.referer.com"}, is_secure=True)
        assert await _delegated_engine("AAAA").evaluate(request) == Allow()

    @pytest.mark.asyncio
    async def test_secure_request_without_referer_allowed_when_not_required(self) -> None:
        request = _request(headers={"X-CSRF-Token": "AAAA"}, is_secure=True)
        engine = _delegated_engine("AAAA", referer_required=False)
        assert await engine.evaluate(request) == Allow()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expected", [None, ""])
    async def test_empty_expected_token_denies(self, expected: str | None) -> None:
        verdict = await _delegated_engine(expected).evaluate(_request(headers={"X-CSRF-Token": "AAAA"}))
        assert verdict == Deny(DenyReason.EXPECTED_TOKEN_UNAVAILABLE, "Could not extract expected anti-forgery token")

    @pytest.mark.asyncio
    async def test_mismatch_denies(self) -> None:
        verdict = await _delegated_engine("correcttoken").evaluate(_request(headers={"X-CSRF-Token": "wrongtoken"}))
        assert verdict == Deny(DenyReason.TOKEN_MISMATCH, "Invalid anti-forgery token")

    @pytest.mark.asyncio
    async def test_extractor_receives_request_context(self) -> None:
        seen: list[RequestContext] = []

        def _extract(request: RequestContext) -> str:
            seen.append(request)
            return "AAAA"

        engine = VerificationEngine(DelegatedTokenOptions(expected_token_extractor=_extract))
        request = _request(headers={"X-CSRF-Token": "AAAA"})
        await engine.evaluate(request)
        assert seen == [request]


class TestLogging:
    @pytest.mark.asyncio
    async def test_denial_is_logged_without_token_values(self, caplog: pytest.LogCaptureFixture) -> None:
        request = _request(headers={**_ORIGIN, "X-CSRF-Token": "wrongtoken"}, cookie_token="correcttoken")
        with caplog.at_level("WARNING", logger="antiforgery.security.engine"):
            await _cookie_engine().evaluate(request)
        assert "token_mismatch" in caplog.text
        assert "wrongtoken" not in caplog.text
        assert "correcttoken" not in caplog.text


class TestBuildProvider:
    def test_cookie_options_build_cookie_provider(self) -> None:
        provider = build_provider(CookieTokenOptions(cookie_protector=_PROTECTOR))
        assert isinstance(provider, CookieTokenProvider)
        assert provider.source_name == "token_factory"

    def test_delegated_options_build_delegated_provider(self) -> None:
        provider = build_provider(DelegatedTokenOptions(expected_token_extractor=lambda request: "t"))
        assert isinstance(provider, DelegatedTokenProvider)
        assert provider.source_name == "expected_token_extractor"

    def test_incomplete_cookie_options_raise(self) -> None:
        with pytest.raises(ConfigurationException) as exc_info:
            build_provider(CookieTokenOptions(cookie_protector=_PROTECTOR, token_factory=None))
        assert exc_info.value.param_name == "token_factory"

    def test_incomplete_delegated_options_raise(self) -> None:
        with pytest.raises(ConfigurationException) as exc_info:
            build_provider(DelegatedTokenOptions())
        assert exc_info.value.param_name == "expected_token_extractor"

    def test_base_options_are_rejected(self) -> None:
        with pytest.raises(TypeError):
            build_provider(AntiForgeryOptions())
