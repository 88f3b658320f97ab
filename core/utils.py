"""
Display and search helpers for tokens.
"""

import unicodedata
from typing import Iterable, List

from core.token import Token

MAX_LABEL_LENGTH = 128


def sanitise_label(text: str) -> str:
    """Remove control characters and limit label length."""
    text = unicodedata.normalize("NFC", text)
    text = "".join(ch for ch in text if unicodedata.category(ch)[0] != "C")
    return text[:MAX_LABEL_LENGTH].strip()


def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        '123 456'

    Args:
        code:  Digit string.
        group: Digit grouping size.

    Returns:
        Spaced OTP string.
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))


def filter_tokens(tokens: Iterable[Token], query: str) -> List[Token]:
    """
    Return the tokens whose issuer or account name contains *query*.

    Matching is case-insensitive; an empty query matches everything.
    """
    needle = query.strip().casefold()
    if not needle:
        return list(tokens)
    return [
        t
        for t in tokens
        if needle in t.display_issuer.casefold()
        or needle in t.display_account_name.casefold()
    ]
