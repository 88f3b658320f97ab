"""
RFC 4648 Base32 helpers for OTP shared secrets.
"""

import base64
import binascii
import re

from core.errors import InvalidEncoding

_BASE32_RE = re.compile(r"[A-Z2-7]+=*")
_WHITESPACE_RE = re.compile(r"\s+")

# Significant-character counts (mod 8) that no byte string can encode to.
_IMPOSSIBLE_TAILS = frozenset({1, 3, 6})


def normalize_secret(secret: str) -> str:
    """
    Normalise a base32 secret: strip whitespace, uppercase, pad.

    Args:
        secret: Raw user-supplied secret string.

    Returns:
        Uppercase base32 string padded to a multiple of 8 characters.

    Raises:
        InvalidEncoding: If the string is empty or contains characters
            outside the base32 alphabet.
    """
    secret = _WHITESPACE_RE.sub("", secret).upper()
    if not secret:
        raise InvalidEncoding("Secret is empty.")
    if not _BASE32_RE.fullmatch(secret):
        raise InvalidEncoding("Secret contains invalid base32 characters.")

    body = secret.rstrip("=")
    if len(body) % 8 in _IMPOSSIBLE_TAILS:
        raise InvalidEncoding("Secret has an invalid base32 length.")
    pad = (8 - len(body) % 8) % 8
    return body + "=" * pad


def decode_secret(secret: str) -> bytes:
    """
    Decode a base32-encoded secret string to raw bytes.

    Args:
        secret: Base32 secret (case-insensitive; whitespace ignored).

    Returns:
        Raw bytes.

    Raises:
        InvalidEncoding: On invalid base32 input.
    """
    normalized = normalize_secret(secret)
    try:
        return base64.b32decode(normalized)
    except binascii.Error as exc:
        raise InvalidEncoding(f"Invalid base32 secret: {exc}") from exc


def encode_secret(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def is_base32(secret: str) -> bool:
    """Return True if *secret* decodes as base32."""
    try:
        decode_secret(secret)
    except InvalidEncoding:
        return False
    return True
