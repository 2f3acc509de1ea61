"""
AES-256-GCM decryption of vault payloads.

The key is the last 64 hex characters of the DOTENV_KEY key part (32 bytes).
Two payload packings are understood:

    v1.<hex iv>.<base64 ciphertext+tag>     versioned packing
    <base64 iv + ciphertext + tag>          packing written by `dotenv-vault build`

Every failure past key decoding is reported as the same DecryptionFailed,
so callers cannot tell a wrong key from a damaged payload.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from dotenv_vault.errors import DecryptionFailed, MalformedKey, UnsupportedVersion
from dotenv_vault.vault.keys import KeyDescriptor

KEY_HEX_LENGTH = 64
NONCE_SIZE = 12
TAG_SIZE = 16
SUPPORTED_VERSIONS = ("v1",)


def decode_key(key_material: str) -> bytes:
    """Turn the key part of a DOTENV_KEY (``key_<hex>``) into 32 raw bytes."""
    if len(key_material) < KEY_HEX_LENGTH:
        raise MalformedKey("Key must be valid")
    try:
        return bytes.fromhex(key_material[-KEY_HEX_LENGTH:])
    except ValueError:
        raise MalformedKey("Failed to decode hex string") from None


def _unpack(blob: str) -> tuple[bytes, bytes]:
    """Split a payload into (nonce, ciphertext + tag)."""
    parts = blob.strip().split(".")
    try:
        if len(parts) == 1:
            raw = base64.b64decode(parts[0], validate=True)
            nonce, sealed = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        elif len(parts) == 3:
            version, iv_hex, payload = parts
            if version not in SUPPORTED_VERSIONS:
                raise UnsupportedVersion(version)
            nonce = bytes.fromhex(iv_hex)
            sealed = base64.b64decode(payload, validate=True)
        else:
            raise DecryptionFailed()
    except (binascii.Error, ValueError):
        raise DecryptionFailed() from None

    if len(nonce) != NONCE_SIZE or len(sealed) < TAG_SIZE:
        raise DecryptionFailed()
    return nonce, sealed


def decrypt(blob: str, key: bytes | KeyDescriptor) -> str:
    """Decrypt a vault payload back to dotenv plaintext."""
    if isinstance(key, KeyDescriptor):
        key = decode_key(key.key_material)
    if len(key) != 32:
        raise MalformedKey(f"Key must be 32 bytes, got {len(key)}")

    nonce, sealed = _unpack(blob)
    try:
        plaintext = AESGCM(key).decrypt(nonce, sealed, None)
        return plaintext.decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        raise DecryptionFailed() from None


def encrypt(plaintext: str, key: bytes, *, version: str | None = "v1") -> str:
    """Encrypt plaintext into a payload ``decrypt`` accepts.

    ``version=None`` produces the unversioned packing used by .env.vault files.
    """
    if version is not None and version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersion(version)
    nonce = secrets.token_bytes(NONCE_SIZE)
    sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    if version is None:
        return base64.b64encode(nonce + sealed).decode("ascii")
    return f"{version}.{nonce.hex()}.{base64.b64encode(sealed).decode('ascii')}"


__all__ = ["SUPPORTED_VERSIONS", "decode_key", "decrypt", "encrypt"]
