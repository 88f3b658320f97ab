"""
Validation for tokens typed in by hand.

The rules here are stricter than :func:`qr.parser.parse_otpauth_uri`, so any
entry that validates also parses. Error messages are meant for the user.
"""

import re
from dataclasses import dataclass, field
from typing import Union

from core.base32 import decode_secret
from core.digest import Algorithm
from core.errors import InvalidEncoding, InvalidParameter, ValidationError
from core.hotp import DEFAULT_DIGITS
from core.token import SUPPORTED_DIGITS, OTPType, Token
from core.totp import DEFAULT_PERIOD
from qr.parser import build_otpauth_uri, parse_otpauth_uri

MAX_FIELD_LENGTH = 50
MIN_SECRET_LENGTH = 16

_SECRET_RE = re.compile(r"[A-Z2-7]+=*")


@dataclass(frozen=True)
class ManualEntry:
    """Cleaned manual-entry fields."""

    issuer: str
    account_name: str
    secret: str = field(repr=False)
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD

    @property
    def uri(self) -> str:
        """The equivalent ``otpauth://totp/...`` URI."""
        return build_otpauth_uri(
            otp_type=OTPType.TOTP,
            account_name=self.account_name,
            secret=self.secret,
            issuer=self.issuer,
            algorithm=self.algorithm,
            digits=self.digits,
            period=self.period,
        )


def _validate_name(field_name: str, title: str, value: str) -> str:
    value = value.strip()
    if not 1 <= len(value) <= MAX_FIELD_LENGTH:
        raise ValidationError(
            field_name, f"{title} must be between 1 and {MAX_FIELD_LENGTH} characters"
        )
    if field_name == "issuer" and ":" in value:
        raise ValidationError(field_name, f"{title} must not contain ':'")
    return value


def _validate_secret(value: str) -> str:
    secret = re.sub(r"\s+", "", value).upper()
    if not _SECRET_RE.fullmatch(secret):
        raise ValidationError("secret", "Secret key must be a valid base32 string.")
    if len(secret) < MIN_SECRET_LENGTH:
        raise ValidationError(
            "secret", f"Secret key must be at least {MIN_SECRET_LENGTH} characters"
        )
    try:
        decode_secret(secret)
    except InvalidEncoding:
        raise ValidationError("secret", "Secret key must be a valid base32 string.") from None
    return secret


def validate_manual_entry(
    issuer: str,
    account_name: str,
    secret: str,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
) -> ManualEntry:
    """
    Check hand-typed token fields.

    Raises:
        ValidationError: With the offending ``field`` and a user-facing message.
    """
    issuer = _validate_name("issuer", "Issuer", issuer)
    account_name = _validate_name("account_name", "Account name", account_name)
    secret = _validate_secret(secret)

    try:
        algorithm = Algorithm.parse(algorithm)
    except InvalidParameter:
        raise ValidationError("algorithm", "Algorithm must be SHA1, SHA256 or SHA512.") from None
    if digits not in SUPPORTED_DIGITS:
        raise ValidationError("digits", "Code length must be 6, 7 or 8 digits.")
    if period <= 0:
        raise ValidationError("period", "Period must be a positive number of seconds.")

    return ManualEntry(
        issuer=issuer,
        account_name=account_name,
        secret=secret,
        algorithm=algorithm,
        digits=digits,
        period=period,
    )


def token_from_manual_entry(
    issuer: str,
    account_name: str,
    secret: str,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
) -> Token:
    """Validate the fields, synthesise a URI and parse it into a token."""
    entry = validate_manual_entry(issuer, account_name, secret, algorithm, digits, period)
    return parse_otpauth_uri(entry.uri)
