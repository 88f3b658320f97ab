"""
Exception hierarchy for the OTP engine.

Everything derives from :class:`ValueError` so callers that only know about
``ValueError`` keep working.
"""

from typing import Optional


class OTPError(ValueError):
    """Base class for all OTP engine errors."""


class InvalidEncoding(OTPError):
    """Text is not valid RFC 4648 Base32."""


# ── URI parsing ───────────────────────────────────────────────────────────────

class ParseError(OTPError):
    """An ``otpauth://`` URI could not be turned into a token."""

    reason = "invalid otpauth URI"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.reason)


class InvalidScheme(ParseError):
    reason = "invalid scheme"


class InvalidHost(ParseError):
    reason = "invalid host"


class MissingSecret(ParseError):
    reason = "missing secret"


class InvalidSecret(ParseError):
    reason = "invalid secret"


class InvalidParameter(ParseError):
    reason = "invalid parameter"


# ── Manual entry ──────────────────────────────────────────────────────────────

class ValidationError(OTPError):
    """A manually entered field failed validation.

    ``str(exc)`` is meant to be shown to the user as-is.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message
