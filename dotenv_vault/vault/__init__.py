"""
Encrypted .env.vault support — AES-256-GCM payloads selected by DOTENV_KEY.

Public API:
    KeyDescriptor.parse(raw)          → one parsed key
    VaultPayloadStore.parse(text)     → environments and their payloads
    VaultResolver(store).resolve(k)   → first candidate key that decrypts
    decrypt(payload, key)             → dotenv plaintext
"""

from __future__ import annotations

from dotenv_vault.vault.crypto import decode_key, decrypt, encrypt
from dotenv_vault.vault.keys import KeyDescriptor, parse_key_candidates, split_keys
from dotenv_vault.vault.resolver import Resolution, VaultResolver
from dotenv_vault.vault.store import VaultPayloadStore

__all__ = [
    "KeyDescriptor",
    "Resolution",
    "VaultPayloadStore",
    "VaultResolver",
    "decode_key",
    "decrypt",
    "encrypt",
    "parse_key_candidates",
    "split_keys",
]
