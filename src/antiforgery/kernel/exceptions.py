"""Exception hierarchy for the anti-forgery gate.

All library exceptions inherit from AntiForgeryException so callers can
catch one base type at the wiring boundary.

Categories:
- ConfigurationException: Construction-time misconfiguration (fatal)
- SecurityException: Failures of injected security capabilities

Per-request outcomes (missing token, mismatch, untrusted origin) are
*not* exceptions; they are ``Deny`` verdicts produced by the engine.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class AntiForgeryException(Exception):
    """Base exception for all anti-forgery errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(AntiForgeryException):
    """A required option is missing or invalid.

    Raised once, when the gate is constructed. A gate that raises this
    must never be wired into the request pipeline.
    """

    def __init__(self, param_name: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Anti-forgery option '{param_name}' is required",
            code="ANTIFORGERY_CONFIG",
            context={"param_name": param_name},
        )
        self.param_name = param_name


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(AntiForgeryException):
    """Failures raised by security capabilities (protectors, validators)."""


class TokenProtectionException(SecurityException):
    """A protected payload could not be unprotected (tampered, foreign key, truncated)."""
