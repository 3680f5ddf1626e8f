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
"""VerificationEngine — one decision per inbound request.

Order of evaluation:

1. ``GET`` on the token endpoint → issue the expected token.
2. Safe method, safe path or safe authentication scheme → allow.
3. Origin/Referer rule of the gate variant.
4. Expected token must be available (never minted here).
5. Presented token must be found (header, then form field).
6. Presented token must equal the expected one.

The engine is stateless: options are frozen and no attribute changes
after construction, so one instance serves concurrent requests.
"""

from __future__ import annotations

import logging

from antiforgery.security.classifier import RequestClassifier
from antiforgery.security.csrf import tokens_match
from antiforgery.security.extractor import TokenExtractor
from antiforgery.security.options import AntiForgeryOptions
from antiforgery.security.providers import ExpectedTokenProvider, build_provider
from antiforgery.security.request import RequestContext
from antiforgery.security.verdict import (
    ALLOW,
    EXPECTED_TOKEN_UNAVAILABLE_MESSAGE,
    TOKEN_MISMATCH_MESSAGE,
    Deny,
    DenyReason,
    Verdict,
    token_absent,
    token_factory_failed,
)

logger = logging.getLogger(__name__)


class VerificationEngine:
    """Classifies a request and verifies its anti-forgery token.

    Args:
        options: Cookie-backed or delegated options. Validated here, once;
            a :class:`~antiforgery.kernel.exceptions.ConfigurationException`
            means the gate must not be wired.
        provider: Override the provider derived from *options*.
    """

    def __init__(self, options: AntiForgeryOptions, provider: ExpectedTokenProvider | None = None) -> None:
        options.validate()
        self._options = options
        self._provider = provider or build_provider(options)
        self._classifier = RequestClassifier(
            safe_methods=options.safe_methods,
            safe_paths=options.safe_paths,
            safe_authentication_schemes=options.safe_authentication_schemes,
        )
        self._extractor = TokenExtractor(
            header_name=options.header_name,
            form_field_name=options.form_field_name,
            form_content_types=options.form_content_types,
        )

    @property
    def options(self) -> AntiForgeryOptions:
        return self._options

    async def evaluate(self, request: RequestContext) -> Verdict:
        if request.method == "GET" and request.path == self._options.token_endpoint:
            issued = self._provider.issue_token(request)
            if issued is None:
                return self._deny(request, token_factory_failed(self._provider.source_name))
            logger.debug("Issued anti-forgery token on %s", request.path)
            return issued

        bypass = self._classifier.bypass_reason(request)
        if bypass is not None:
            logger.debug("Anti-forgery check bypassed (%s): %s %s", bypass, request.method, request.path)
            return ALLOW

        origin_denial = self._provider.check_origin(request)
        if origin_denial is not None:
            return self._deny(request, origin_denial)

        expected = self._provider.expected_token(request)
        if not expected:
            return self._deny(
                request, Deny(DenyReason.EXPECTED_TOKEN_UNAVAILABLE, EXPECTED_TOKEN_UNAVAILABLE_MESSAGE)
            )

        lookup = await self._extractor.extract(request)
        if lookup.token is None:
            return self._deny(request, token_absent(lookup.location))

        if not tokens_match(lookup.token, expected):
            return self._deny(request, Deny(DenyReason.TOKEN_MISMATCH, TOKEN_MISMATCH_MESSAGE))

        return ALLOW

    @staticmethod
    def _deny(request: RequestContext, verdict: Deny) -> Deny:
        logger.warning(
            "Anti-forgery check failed (%s): %s %s",
            verdict.reason.value,
            request.method,
            request.path,
        )
        return verdict
