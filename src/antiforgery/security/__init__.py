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
"""Security — framework-agnostic anti-forgery verification."""

from antiforgery.security.classifier import RequestClassifier
from antiforgery.security.codec import CookieTokenCodec
from antiforgery.security.context import SecurityContext
from antiforgery.security.csrf import generate_csrf_token, tokens_match
from antiforgery.security.engine import VerificationEngine
from antiforgery.security.extractor import TokenExtractor, TokenLookup
from antiforgery.security.options import (
    AntiForgeryOptions,
    CookieTokenOptions,
    Defaults,
    DelegatedTokenOptions,
)
from antiforgery.security.origin import check_origin_signal, check_secure_referer, trusted_origins
from antiforgery.security.protector import CookieProtector, FernetCookieProtector
from antiforgery.security.providers import (
    CookieTokenProvider,
    DelegatedTokenProvider,
    ExpectedTokenProvider,
    build_provider,
)
from antiforgery.security.request import RequestContext
from antiforgery.security.verdict import Allow, Deny, DenyReason, IssueToken, TokenCookie, Verdict

__all__ = [
    "Allow",
    "AntiForgeryOptions",
    "CookieProtector",
    "CookieTokenCodec",
    "CookieTokenOptions",
    "CookieTokenProvider",
    "Defaults",
    "DelegatedTokenOptions",
    "DelegatedTokenProvider",
    "Deny",
    "DenyReason",
    "ExpectedTokenProvider",
    "FernetCookieProtector",
    "IssueToken",
    "RequestClassifier",
    "RequestContext",
    "SecurityContext",
    "TokenCookie",
    "TokenExtractor",
    "TokenLookup",
    "Verdict",
    "VerificationEngine",
    "build_provider",
    "check_origin_signal",
    "check_secure_referer",
    "generate_csrf_token",
    "tokens_match",
    "trusted_origins",
]
