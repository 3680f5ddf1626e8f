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
"""Starlette adapter — the only place Starlette is imported."""

from antiforgery.web.adapters.starlette.app import antiforgery_middleware, antiforgery_middleware_from_config
from antiforgery.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from antiforgery.web.adapters.starlette.filters import AntiForgeryFilter
from antiforgery.web.adapters.starlette.request import to_request_context
from antiforgery.web.adapters.starlette.response import materialize, vary_on_cookie

__all__ = [
    "AntiForgeryFilter",
    "WebFilterChainMiddleware",
    "antiforgery_middleware",
    "antiforgery_middleware_from_config",
    "materialize",
    "to_request_context",
    "vary_on_cookie",
]
