"""
QR code image import.

Uses OpenCV to read image files and pyzbar for decoding. Both are optional
(``pip install .[qr]``); a clear error is raised when they are missing.
"""

import logging
import os
from typing import Optional

from core.errors import ParseError
from core.token import Token
from qr.parser import SCHEME, parse_otpauth_uri

logger = logging.getLogger(__name__)


def _check_deps() -> tuple[bool, str]:
    """Return (available, message) for optional scanning deps."""
    try:
        import cv2  # noqa: F401
        from pyzbar import pyzbar  # noqa: F401
        return True, ""
    except ImportError as exc:
        return False, str(exc)


def scan_image_file(path: str) -> Optional[str]:
    """
    Decode the first otpauth QR code from an image file.

    Args:
        path: Path to the image file.

    Returns:
        Decoded URI string, or None if no otpauth QR code is found.

    Raises:
        RuntimeError: If dependencies are unavailable.
        FileNotFoundError: If the image file does not exist.
        ValueError: If the file is not a readable image.
    """
    available, msg = _check_deps()
    if not available:
        raise RuntimeError(
            f"QR scanning requires opencv-python and pyzbar: {msg}"
        )

    import cv2
    from pyzbar import pyzbar

    if not os.path.isfile(path):
        raise FileNotFoundError(f"Image not found: {path}")

    img = cv2.imread(path)
    if img is None:
        raise ValueError(f"Could not read image: {path}")

    for code in pyzbar.decode(img):
        if code.type != "QRCODE":
            continue
        data = code.data.decode("utf-8", errors="ignore")
        if data.lower().startswith(f"{SCHEME}://"):
            return data
        logger.info("Skipping non-otpauth QR code in %s", path)
    return None


def import_token_from_image(path: str) -> Token:
    """
    Read a provisioning QR code from *path* and parse it.

    Raises:
        ParseError: If the image holds no otpauth QR code, or the URI is
            invalid.
    """
    uri = scan_image_file(path)
    if uri is None:
        raise ParseError(f"No otpauth QR code found in {path}.")
    token = parse_otpauth_uri(uri)
    logger.info("Imported %s token from %s", token.otp_type.value, path)
    return token
