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
"""Anti-forgery gate configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from antiforgery.core.config import config_properties
from antiforgery.security.options import Defaults


@config_properties(prefix="antiforgery")
@dataclass
class AntiForgeryProperties:
    """Configuration for the anti-forgery gate (antiforgery.*).

    Only plain values live here. Capabilities (protector, token factory,
    expected-token extractor) are injected when options are built; the
    exception is ``cookie_keys``, which builds a Fernet protector, and
    ``trusted_origins``, which builds an origin validator.
    """

    token_endpoint: str = Defaults.TOKEN_ENDPOINT
    failure_status_code: int = Defaults.FAILURE_STATUS_CODE
    header_name: str = Defaults.HEADER_NAME
    form_field_name: str = Defaults.FORM_FIELD_NAME
    form_content_types: list[str] = field(default_factory=lambda: sorted(Defaults.FORM_CONTENT_TYPES))
    safe_methods: list[str] = field(default_factory=lambda: sorted(Defaults.SAFE_METHODS))
    safe_paths: list[str] = field(default_factory=list)
    safe_authentication_schemes: list[str] = field(default_factory=list)
    cookie_name: str = Defaults.COOKIE_NAME
    cookie_keys: list[str] = field(default_factory=list)
    trusted_origins: list[str] = field(default_factory=list)
    referer_required: bool = Defaults.REFERER_REQUIRED
