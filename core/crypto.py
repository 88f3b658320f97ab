"""
Passcode hashing and credential encryption.

These helpers back the lock screen and the password vault. They share no
code with the OTP engine.

Passcode hashing : PBKDF2-HMAC-SHA256, random salt stored with the key
Credentials      : AES-256-GCM (authenticated encryption)
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass, field
from typing import Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

# ── Constants ────────────────────────────────────────────────────────────────

SALT_SIZE = 32          # 256-bit salt
NONCE_SIZE = 12         # 96-bit nonce (GCM recommendation)
KEY_SIZE = 32           # 256-bit derived key / AES key
PBKDF2_ITERATIONS = 480_000  # OWASP 2023 recommendation for PBKDF2-SHA256
PBKDF2_HASH = "sha256"


# ── Passcodes ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PasscodeHash:
    """Salt and derived key, persisted together."""

    salt: bytes = field(repr=False)
    key: bytes = field(repr=False)

    def to_hex(self) -> str:
        """Serialise as ``salt_hex$key_hex``."""
        return f"{self.salt.hex()}${self.key.hex()}"

    @classmethod
    def from_hex(cls, value: str) -> "PasscodeHash":
        try:
            salt_hex, key_hex = value.split("$", 1)
            return cls(bytes.fromhex(salt_hex), bytes.fromhex(key_hex))
        except ValueError as exc:
            raise ValueError(f"Malformed passcode hash: {exc}") from exc


def generate_salt() -> bytes:
    """Return a cryptographically random 32-byte salt."""
    return secrets.token_bytes(SALT_SIZE)


def derive_key(passcode: str, salt: bytes) -> bytes:
    """
    Derive a 256-bit key from ``passcode`` using PBKDF2-HMAC-SHA256.

    Args:
        passcode: Plaintext passcode (unicode string).
        salt:     Random salt.

    Returns:
        32-byte derived key.
    """
    return hashlib.pbkdf2_hmac(
        PBKDF2_HASH,
        passcode.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
        dklen=KEY_SIZE,
    )


def hash_passcode(passcode: str, salt: Optional[bytes] = None) -> PasscodeHash:
    """Hash a passcode with a fresh (or given) salt."""
    salt = salt if salt is not None else generate_salt()
    return PasscodeHash(salt=salt, key=derive_key(passcode, salt))


def verify_passcode(passcode: str, stored: PasscodeHash) -> bool:
    """Return True if *passcode* matches *stored* (timing-safe)."""
    candidate = derive_key(passcode, stored.salt)
    return hmac.compare_digest(candidate, stored.key)


# ── Credentials (AES-256-GCM) ────────────────────────────────────────────────

def encrypt_credential(plaintext: str, key: bytes) -> bytes:
    """
    Encrypt a credential with AES-256-GCM.

    Layout of returned blob::

        [ nonce (12 bytes) | ciphertext+tag ]

    Raises:
        ValueError: If key length is not 32 bytes.
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    nonce = secrets.token_bytes(NONCE_SIZE)
    return nonce + AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)


def decrypt_credential(blob: bytes, key: bytes) -> str:
    """
    Decrypt a blob produced by :func:`encrypt_credential`.

    Raises:
        ValueError: If key length is not 32 bytes.
        cryptography.exceptions.InvalidTag: If authentication fails (wrong key
            or tampered data).
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
    return AESGCM(key).decrypt(nonce, ciphertext, None).decode("utf-8")
