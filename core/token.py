"""
Immutable OTP token descriptor.

A :class:`Token` is built once (from a scanned URI, an imported image or a
manual entry) and is read-only afterwards. Renaming or advancing a HOTP
counter produces a replacement token with the same ``id``.
"""

import dataclasses
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from core.base32 import encode_secret
from core.digest import Algorithm
from core.errors import InvalidParameter, InvalidSecret, ValidationError
from core.hotp import DEFAULT_DIGITS, MAX_COUNTER, generate_hotp
from core.totp import DEFAULT_PERIOD, generate_totp
from core.totp import remaining_seconds as _remaining_seconds

SUPPORTED_DIGITS = (6, 7, 8)


class OTPType(str, Enum):
    """Where the moving factor comes from."""

    HOTP = "hotp"
    TOTP = "totp"


@dataclass(frozen=True)
class Token:
    """A validated OTP token."""

    otp_type: OTPType
    secret: bytes = field(repr=False)
    account_name: str = ""
    issuer: str = ""
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD
    counter: int = 0
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        # Accept plain strings for the enums; stored values are always enums.
        object.__setattr__(self, "otp_type", OTPType(self.otp_type))
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))

        if not self.secret:
            raise InvalidSecret("Secret must decode to at least one byte.")
        if self.digits not in SUPPORTED_DIGITS:
            raise InvalidParameter(
                f"Digits must be one of {', '.join(map(str, SUPPORTED_DIGITS))}."
            )
        if self.period <= 0:
            raise InvalidParameter("Period must be a positive number of seconds.")
        if not 0 <= self.counter <= MAX_COUNTER:
            raise InvalidParameter("Counter must be a non-negative 64-bit integer.")

    # ── Derived views ────────────────────────────────────────────────────

    @property
    def display_issuer(self) -> str:
        return (self.issuer or "").strip()

    @property
    def display_account_name(self) -> str:
        return (self.account_name or "").strip()

    @property
    def label(self) -> str:
        """``Issuer:Account`` or just the account name."""
        if self.display_issuer:
            return f"{self.display_issuer}:{self.display_account_name}"
        return self.display_account_name

    @property
    def uri(self) -> str:
        """Canonical ``otpauth://`` URI describing this token."""
        from qr.parser import build_otpauth_uri

        return build_otpauth_uri(
            otp_type=self.otp_type,
            account_name=self.display_account_name,
            secret=encode_secret(self.secret),
            issuer=self.display_issuer,
            algorithm=self.algorithm,
            digits=self.digits,
            period=self.period,
            counter=self.counter,
        )

    # ── Codes ────────────────────────────────────────────────────────────

    def code(self, at: Optional[float] = None) -> str:
        """
        Return the code for this token.

        Args:
            at: Unix timestamp for TOTP tokens (current time if None).
                Ignored for HOTP tokens, which use :attr:`counter`.
        """
        if self.otp_type is OTPType.HOTP:
            return generate_hotp(self.secret, self.counter, self.digits, self.algorithm)
        return generate_totp(
            self.secret,
            digits=self.digits,
            period=self.period,
            algorithm=self.algorithm,
            timestamp=at,
        )

    def remaining_seconds(self, at: Optional[float] = None) -> int:
        """Seconds until the TOTP code changes."""
        if self.otp_type is not OTPType.TOTP:
            raise InvalidParameter("HOTP tokens have no time window.")
        return _remaining_seconds(self.period, at)

    # ── Replacements ─────────────────────────────────────────────────────

    def renamed(self, issuer: str, account_name: str) -> "Token":
        """
        Return a copy with new labels; secret and parameters are kept.

        Both labels are trimmed and must not be empty.

        Raises:
            ValidationError: If a label is blank or the issuer contains ':'.
        """
        issuer = issuer.strip()
        account_name = account_name.strip()
        if not issuer:
            raise ValidationError("issuer", "Issuer must not be empty")
        if ":" in issuer:
            raise ValidationError("issuer", "Issuer must not contain ':'")
        if not account_name:
            raise ValidationError("account_name", "Account name must not be empty")
        return dataclasses.replace(self, issuer=issuer, account_name=account_name)

    def with_counter(self, counter: int) -> "Token":
        """Return a copy with a new HOTP counter."""
        return dataclasses.replace(self, counter=counter)
