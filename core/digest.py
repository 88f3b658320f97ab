"""
Keyed-hash primitives used by the OTP generators.

HMAC is computed with the ``cryptography`` package; nothing here is
reimplemented by hand.
"""

from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from core.errors import InvalidParameter


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: str) -> "Algorithm":
        """
        Match an algorithm name case-insensitively.

        ``"sha256"``, ``"SHA-256"`` and ``Algorithm.SHA256`` all map to
        :attr:`SHA256`.

        Raises:
            InvalidParameter: If the name is not a supported algorithm.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().upper().replace("-", "")
        try:
            return cls(name)
        except ValueError:
            raise InvalidParameter(
                f"Unsupported algorithm '{value}'. Supported: SHA1, SHA256, SHA512."
            ) from None

    @property
    def digest_size(self) -> int:
        return _HASHES[self].digest_size


_HASHES: dict[Algorithm, hashes.HashAlgorithm] = {
    Algorithm.SHA1: hashes.SHA1(),
    Algorithm.SHA256: hashes.SHA256(),
    Algorithm.SHA512: hashes.SHA512(),
}


def hmac_digest(algorithm: Algorithm, key: bytes, message: bytes) -> bytes:
    """
    Compute HMAC(*key*, *message*) with the given algorithm.

    Args:
        algorithm: Hash function to key.
        key:       Secret key bytes.
        message:   Message bytes.

    Returns:
        Raw digest (20, 32 or 64 bytes for SHA1, SHA256, SHA512).
    """
    h = crypto_hmac.HMAC(key, _HASHES[Algorithm.parse(algorithm)])
    h.update(message)
    return h.finalize()
