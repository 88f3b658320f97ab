"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import struct

from core.digest import Algorithm, hmac_digest
from core.errors import InvalidParameter, InvalidSecret

DEFAULT_DIGITS = 6
MAX_COUNTER = 2**64 - 1


def truncate(digest: bytes) -> int:
    """
    Dynamic truncation (RFC 4226 §5.3).

    The low nibble of the last digest byte selects an offset; the four bytes
    at that offset, with the top bit cleared, form a 31-bit integer.
    """
    offset = digest[-1] & 0x0F
    return (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )


def generate_hotp(
    secret_bytes: bytes,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret_bytes: Raw decoded secret bytes.
        counter:      Synchronisation counter value (unsigned 64-bit).
        digits:       Number of OTP digits. Any value >= 1 is computed;
                      token construction narrows this to 6-8.
        algorithm:    HMAC algorithm.

    Returns:
        Zero-padded OTP string of exactly ``digits`` characters.

    Raises:
        InvalidSecret:    If ``secret_bytes`` is empty.
        InvalidParameter: If ``counter`` or ``digits`` is out of range.
    """
    if not secret_bytes:
        raise InvalidSecret("Secret must not be empty.")
    if counter < 0 or counter > MAX_COUNTER:
        raise InvalidParameter("Counter must fit in an unsigned 64-bit integer.")
    if digits < 1:
        raise InvalidParameter("Digits must be at least 1.")

    msg = struct.pack(">Q", counter)
    digest = hmac_digest(algorithm, secret_bytes, msg)
    otp = truncate(digest) % (10**digits)
    return str(otp).zfill(digits)
