"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator. Every function takes an
optional ``timestamp``; only when it is omitted is the system clock read.
"""

import time
from typing import Optional

from core.digest import Algorithm
from core.errors import InvalidParameter
from core.hotp import DEFAULT_DIGITS, generate_hotp

DEFAULT_PERIOD = 30


def _now(timestamp: Optional[float]) -> float:
    return timestamp if timestamp is not None else time.time()


def time_counter(timestamp: float, period: int = DEFAULT_PERIOD) -> int:
    """
    Return the RFC 6238 time-step counter ``floor(timestamp / period)``.

    Raises:
        InvalidParameter: If ``period`` is not positive or ``timestamp`` is
            negative.
    """
    if period <= 0:
        raise InvalidParameter("Period must be a positive number of seconds.")
    if timestamp < 0:
        raise InvalidParameter("Timestamp must not be negative.")
    return int(timestamp) // period


def generate_totp(
    secret_bytes: bytes,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
    algorithm: Algorithm = Algorithm.SHA1,
    timestamp: Optional[float] = None,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret_bytes: Raw (already base32-decoded) secret bytes.
        digits:       Number of digits in the OTP (default 6).
        period:       Time step in seconds (default 30).
        algorithm:    HMAC algorithm (default SHA1 for GA compatibility).
        timestamp:    Unix timestamp to compute the code for
                      (uses time.time() if None).

    Returns:
        OTP string, zero-padded to ``digits`` characters.
    """
    counter = time_counter(_now(timestamp), period)
    return generate_hotp(secret_bytes, counter, digits, algorithm)


def remaining_seconds(period: int = DEFAULT_PERIOD, timestamp: Optional[float] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    if period <= 0:
        raise InvalidParameter("Period must be a positive number of seconds.")
    return period - (int(_now(timestamp)) % period)
