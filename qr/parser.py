"""
Parse otpauth:// URIs as defined by the Google Authenticator Key URI Format.

Reference: https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

import logging
import urllib.parse
from typing import Any, Callable, Dict, Optional, Union

from core.base32 import decode_secret, normalize_secret
from core.digest import Algorithm
from core.errors import (
    InvalidEncoding,
    InvalidHost,
    InvalidParameter,
    InvalidScheme,
    InvalidSecret,
    MissingSecret,
    ParseError,
)
from core.hotp import DEFAULT_DIGITS, MAX_COUNTER
from core.token import SUPPORTED_DIGITS, OTPType, Token
from core.totp import DEFAULT_PERIOD
from core.utils import sanitise_label

logger = logging.getLogger(__name__)

SCHEME = "otpauth"


# ── Parameter parsers ─────────────────────────────────────────────────────────
# One parser per query parameter; each turns the raw text into a typed value
# or raises a ParseError.

def _parse_secret(value: str) -> bytes:
    if not value.strip():
        raise MissingSecret("Missing 'secret' parameter in otpauth URI.")
    try:
        secret = decode_secret(value)
    except InvalidEncoding as exc:
        raise InvalidSecret(f"Secret is not valid base32: {exc}") from exc
    if not secret:
        raise InvalidSecret("Secret decodes to an empty key.")
    return secret


def _parse_int(name: str, value: str, low: int, high: Optional[int] = None) -> int:
    try:
        number = int(value.strip())
    except ValueError:
        raise InvalidParameter(f"'{name}' must be an integer, got '{value}'.") from None
    if number < low or (high is not None and number > high):
        raise InvalidParameter(f"'{name}' is out of range: {number}.")
    return number


def _parse_digits(value: str) -> int:
    digits = _parse_int("digits", value, low=0)
    if digits not in SUPPORTED_DIGITS:
        raise InvalidParameter(
            f"'digits' must be one of {', '.join(map(str, SUPPORTED_DIGITS))}, got {digits}."
        )
    return digits


_PARAMETER_PARSERS: Dict[str, Callable[[str], Any]] = {
    "secret": _parse_secret,
    "issuer": lambda value: sanitise_label(value),
    "algorithm": Algorithm.parse,
    "digits": _parse_digits,
    "period": lambda value: _parse_int("period", value, low=1),
    "counter": lambda value: _parse_int("counter", value, low=0, high=MAX_COUNTER),
}

_IGNORED_BY_TYPE = {
    OTPType.TOTP: {"counter"},
    OTPType.HOTP: {"period"},
}


def _query_parameters(query: str) -> Dict[str, str]:
    """First occurrence of each parameter, names lower-cased."""
    params: Dict[str, str] = {}
    for name, value in urllib.parse.parse_qsl(query, keep_blank_values=True):
        params.setdefault(name.lower(), value)
    return params


def _split_label(raw_label: str) -> tuple[str, str]:
    """Split ``Issuer:Account`` on the first colon."""
    if ":" in raw_label:
        issuer, account_name = raw_label.split(":", 1)
    else:
        issuer, account_name = "", raw_label
    return sanitise_label(issuer), sanitise_label(account_name)


# ── Public API ────────────────────────────────────────────────────────────────

def parse_otpauth_uri(uri: str) -> Token:
    """
    Parse and validate an ``otpauth://`` URI.

    Args:
        uri: Full otpauth URI string.

    Returns:
        A new immutable :class:`~core.token.Token`.

    Raises:
        InvalidScheme:    The URI is malformed or the scheme is not ``otpauth``.
        InvalidHost:      The OTP type is not ``totp`` or ``hotp``.
        MissingSecret:    No ``secret`` parameter.
        InvalidSecret:    The secret is not base32 or decodes to nothing.
        InvalidParameter: ``algorithm``, ``digits``, ``period`` or
                          ``counter`` is present but invalid.
    """
    try:
        parsed = urllib.parse.urlparse(uri.strip())
    except ValueError as exc:
        raise InvalidScheme(f"Malformed otpauth URI: {exc}") from exc

    if parsed.scheme.lower() != SCHEME:
        raise InvalidScheme(f"Expected 'otpauth' scheme, got '{parsed.scheme}'.")

    try:
        otp_type = OTPType(parsed.netloc.lower())
    except ValueError:
        raise InvalidHost(
            f"Unknown OTP type '{parsed.netloc}'. Expected totp or hotp."
        ) from None

    label_issuer, account_name = _split_label(
        urllib.parse.unquote(parsed.path.lstrip("/"))
    )

    raw_params = _query_parameters(parsed.query)
    if "secret" not in raw_params:
        raise MissingSecret("Missing 'secret' parameter in otpauth URI.")

    values: Dict[str, Any] = {}
    for name, raw in raw_params.items():
        parser = _PARAMETER_PARSERS.get(name)
        if parser is None or name in _IGNORED_BY_TYPE[otp_type]:
            continue
        values[name] = parser(raw)

    token = Token(
        otp_type=otp_type,
        secret=values["secret"],
        account_name=account_name,
        issuer=values.get("issuer") or label_issuer,
        algorithm=values.get("algorithm", Algorithm.SHA1),
        digits=values.get("digits", DEFAULT_DIGITS),
        period=values.get("period", DEFAULT_PERIOD),
        counter=values.get("counter", 0),
    )
    logger.debug(
        "Parsed %s token (issuer=%r, algorithm=%s, digits=%d)",
        token.otp_type.value, token.issuer, token.algorithm.value, token.digits,
    )
    return token


def try_parse_otpauth_uri(uri: str) -> Optional[Token]:
    """Like :func:`parse_otpauth_uri` but returns None on failure."""
    try:
        return parse_otpauth_uri(uri)
    except ParseError as exc:
        logger.warning("Rejected otpauth URI (%s): %s", exc.reason, exc)
        return None


def build_otpauth_uri(
    otp_type: Union[OTPType, str],
    account_name: str,
    secret: str,
    issuer: str = "",
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
    counter: int = 0,
) -> str:
    """Build an otpauth:// URI from individual parameters."""
    otp_type = OTPType(otp_type)
    # A leading ':' keeps an account name containing ':' from being split
    label = f"{issuer}:{account_name}" if issuer or ":" in account_name else account_name
    params: dict = {
        "secret": normalize_secret(secret).rstrip("="),
        "algorithm": Algorithm.parse(algorithm).value,
        "digits": str(digits),
    }
    if issuer:
        params["issuer"] = issuer
    if otp_type is OTPType.TOTP:
        params["period"] = str(period)
    else:
        params["counter"] = str(counter)

    query = urllib.parse.urlencode(params, quote_via=urllib.parse.quote)
    label_encoded = urllib.parse.quote(label, safe="")
    return f"{SCHEME}://{otp_type.value}/{label_encoded}?{query}"
