"""
Authify – command-line entry point.

Usage
-----
    python main.py code "otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP"
    python main.py parse URI
    python main.py scan qr.png
    python main.py manual --issuer Example --account alice --secret JBSWY3DPEHPK3PXP

Or, if installed as a package:
    authify code URI
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from core.errors import OTPError
from core.token import OTPType, Token
from core.utils import format_otp
from qr.manual import token_from_manual_entry
from qr.parser import parse_otpauth_uri

# ── Logging setup ─────────────────────────────────────────────────────────────

LOG_LEVEL_ENV = "AUTHIFY_LOG_LEVEL"

logger = logging.getLogger("authify")


def _log_level() -> int:
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def _configure_logging() -> None:
    logging.basicConfig(
        level=_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Keep secret-adjacent modules quiet regardless of the global level
    logging.getLogger("core.crypto").setLevel(logging.WARNING)


# ── Output ────────────────────────────────────────────────────────────────────

def _describe(token: Token) -> str:
    lines = [
        f"id:        {token.id}",
        f"type:      {token.otp_type.value}",
        f"issuer:    {token.display_issuer}",
        f"account:   {token.display_account_name}",
        f"algorithm: {token.algorithm.value}",
        f"digits:    {token.digits}",
    ]
    if token.otp_type is OTPType.TOTP:
        lines.append(f"period:    {token.period}")
    else:
        lines.append(f"counter:   {token.counter}")
    return "\n".join(lines)


def _print_code(token: Token, at: Optional[float], grouped: bool) -> None:
    code = token.code(at)
    shown = format_otp(code) if grouped else code
    if token.otp_type is OTPType.TOTP:
        print(f"{shown}  ({token.remaining_seconds(at)}s)")
    else:
        print(shown)


# ── Commands ──────────────────────────────────────────────────────────────────

def cmd_code(args: argparse.Namespace) -> None:
    _print_code(parse_otpauth_uri(args.uri), args.at, args.grouped)


def cmd_parse(args: argparse.Namespace) -> None:
    print(_describe(parse_otpauth_uri(args.uri)))


def cmd_scan(args: argparse.Namespace) -> None:
    from qr.scanner import import_token_from_image

    token = import_token_from_image(args.image)
    print(_describe(token))
    _print_code(token, args.at, args.grouped)


def cmd_manual(args: argparse.Namespace) -> None:
    token = token_from_manual_entry(
        issuer=args.issuer,
        account_name=args.account,
        secret=args.secret,
        algorithm=args.algorithm,
        digits=args.digits,
        period=args.period,
    )
    print(token.uri)
    _print_code(token, args.at, args.grouped)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="authify", description="OTP code generator")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--at", type=float, default=None,
                        help="Unix timestamp to compute the code for (default: now)")
    common.add_argument("--grouped", action="store_true",
                        help="Print the code in groups of three digits")

    p = sub.add_parser("code", parents=[common], help="Print the current code for a URI")
    p.add_argument("uri")
    p.set_defaults(func=cmd_code)

    p = sub.add_parser("parse", help="Show the fields of an otpauth URI")
    p.add_argument("uri")
    p.set_defaults(func=cmd_parse)

    p = sub.add_parser("scan", parents=[common], help="Import a token from a QR image")
    p.add_argument("image")
    p.set_defaults(func=cmd_scan)

    p = sub.add_parser("manual", parents=[common], help="Build a token from typed fields")
    p.add_argument("--issuer", required=True)
    p.add_argument("--account", required=True)
    p.add_argument("--secret", required=True)
    p.add_argument("--algorithm", default="SHA1")
    p.add_argument("--digits", type=int, default=6)
    p.add_argument("--period", type=int, default=30)
    p.set_defaults(func=cmd_manual)

    return parser


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except OTPError as exc:
        logger.info("Command %s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (RuntimeError, OSError, ValueError) as exc:
        # Image import failures: missing QR libraries, unreadable files
        logger.info("Command %s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
