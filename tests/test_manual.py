"""Tests for qr.manual."""

import pytest

from core.digest import Algorithm
from core.errors import ValidationError
from core.token import OTPType
from qr.manual import token_from_manual_entry, validate_manual_entry
from qr.parser import parse_otpauth_uri

SECRET = "JBSWY3DPEHPK3PXP"


def test_valid_entry_builds_token() -> None:
    token = token_from_manual_entry(
        issuer="GitHub",
        account_name="alice@example.com",
        secret=SECRET,
        algorithm="SHA256",
        digits=8,
    )
    assert token.otp_type is OTPType.TOTP
    assert token.display_issuer == "GitHub"
    assert token.display_account_name == "alice@example.com"
    assert token.algorithm is Algorithm.SHA256
    assert token.digits == 8
    assert token.secret == b"Hello!\xde\xad\xbe\xef"


def test_fields_are_trimmed() -> None:
    entry = validate_manual_entry("  GitHub ", " alice ", SECRET)
    assert entry.issuer == "GitHub"
    assert entry.account_name == "alice"


def test_secret_spaces_and_case_normalised() -> None:
    entry = validate_manual_entry("GitHub", "alice", "jbsw y3dp ehpk 3pxp")
    assert entry.secret == SECRET


def test_synthesised_uri_carries_issuer_twice() -> None:
    entry = validate_manual_entry("Big Corp", "alice", SECRET)
    assert entry.uri.startswith("otpauth://totp/Big%20Corp%3Aalice?")
    assert "issuer=Big%20Corp" in entry.uri


@pytest.mark.parametrize("issuer", ["", "   ", "x" * 51])
def test_issuer_length(issuer: str) -> None:
    with pytest.raises(ValidationError, match="Issuer must be between 1 and 50") as excinfo:
        validate_manual_entry(issuer, "alice", SECRET)
    assert excinfo.value.field == "issuer"


def test_issuer_colon_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_manual_entry("Git:Hub", "alice", SECRET)
    assert excinfo.value.field == "issuer"


@pytest.mark.parametrize("account", ["", "y" * 51])
def test_account_name_length(account: str) -> None:
    with pytest.raises(ValidationError, match="Account name") as excinfo:
        validate_manual_entry("GitHub", account, SECRET)
    assert excinfo.value.field == "account_name"


def test_fifty_characters_accepted() -> None:
    entry = validate_manual_entry("x" * 50, "y" * 50, SECRET)
    assert parse_otpauth_uri(entry.uri).display_issuer == "x" * 50


@pytest.mark.parametrize("secret", ["JBSWY3DPEHPK3PX1", "JBSWY3DP-EHPK3PXP", "секрет"])
def test_secret_alphabet(secret: str) -> None:
    with pytest.raises(ValidationError, match="valid base32") as excinfo:
        validate_manual_entry("GitHub", "alice", secret)
    assert excinfo.value.field == "secret"


def test_secret_minimum_length() -> None:
    with pytest.raises(ValidationError, match="at least 16 characters"):
        validate_manual_entry("GitHub", "alice", "JBSWY3DP")


def test_secret_impossible_length() -> None:
    # 17 base32 characters cannot come from any byte string
    with pytest.raises(ValidationError, match="valid base32"):
        validate_manual_entry("GitHub", "alice", SECRET + "A")


@pytest.mark.parametrize("kwargs,field", [
    ({"digits": 5}, "digits"),
    ({"digits": 9}, "digits"),
    ({"period": 0}, "period"),
    ({"algorithm": "MD5"}, "algorithm"),
])
def test_parameter_validation(kwargs: dict, field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_manual_entry("GitHub", "alice", SECRET, **kwargs)
    assert excinfo.value.field == field


@pytest.mark.parametrize("issuer,account,secret", [
    ("GitHub", "alice@example.com", SECRET),
    ("Big Corp & Sons", "a/b?c#d", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"),
    ("Émile", "team:alice", "gezd gnbv gy3t qojq"),
    ("%41", "100%", "MZXW6YTBOI======"),
])
def test_valid_entries_always_parse(issuer: str, account: str, secret: str) -> None:
    entry = validate_manual_entry(issuer, account, secret)
    token = parse_otpauth_uri(entry.uri)
    assert token.display_issuer == issuer
    assert token.display_account_name == account
