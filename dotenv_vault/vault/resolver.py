"""
Vault resolution — try each DOTENV_KEY candidate until one decrypts.

Candidates are tried in the order given. A candidate whose environment is
missing, or whose payload does not decrypt, is recorded and the next one is
tried; the first success wins. Only when every candidate failed does the
caller see an error, listing what happened to each key (never the key).

Usage:
    resolver = VaultResolver(VaultPayloadStore.from_file(".env.vault"))
    mapping = resolver.resolve_or_raise(os.environ["DOTENV_KEY"])
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv_vault.errors import (
    CandidateFailure,
    DecryptionFailed,
    DotenvVaultError,
    EnvironmentNotFound,
    MalformedKey,
    UnsupportedVersion,
    VaultResolutionFailed,
)
from dotenv_vault.parser import Lookup, parse
from dotenv_vault.vault.crypto import decrypt
from dotenv_vault.vault.keys import KeyDescriptor, parse_key_candidates
from dotenv_vault.vault.store import VaultPayloadStore

logger = logging.getLogger(__name__)

ENVIRONMENT_NOT_FOUND = "environment_not_found"
DECRYPTION_FAILED = "decryption_failed"
UNSUPPORTED_VERSION = "unsupported_version"
INVALID_KEY = "invalid_key"

_REASONS: list[tuple[type[DotenvVaultError], str]] = [
    (EnvironmentNotFound, ENVIRONMENT_NOT_FOUND),
    (UnsupportedVersion, UNSUPPORTED_VERSION),
    (DecryptionFailed, DECRYPTION_FAILED),
    (MalformedKey, INVALID_KEY),
]


@dataclass
class Resolution:
    """Outcome of trying every candidate: a mapping, or the reasons there is none."""

    mapping: dict[str, str] | None = None
    environment: str | None = None
    position: int | None = None
    failures: list[CandidateFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.mapping is not None


class VaultResolver:
    """Decrypts a vault using the first DOTENV_KEY candidate that fits."""

    def __init__(
        self, store: VaultPayloadStore, lookup: Lookup | None = os.environ.get
    ) -> None:
        self.store = store
        # Expansion source for the decrypted plaintext; None means no outside values.
        self.lookup = lookup

    def try_candidate(self, descriptor: KeyDescriptor) -> str:
        """Look up and decrypt the payload for one key. Raises the typed error."""
        payload = self.store.lookup(descriptor.environment)
        return decrypt(payload, descriptor)

    def resolve(self, raw_keys: str) -> Resolution:
        """Try each key in ``raw_keys`` in order. Raises NoValidKeys if none parse."""
        result = Resolution()
        for position, descriptor in enumerate(parse_key_candidates(raw_keys), start=1):
            try:
                plaintext = self.try_candidate(descriptor)
            except (EnvironmentNotFound, DecryptionFailed, UnsupportedVersion, MalformedKey) as e:
                reason = next(r for cls, r in _REASONS if isinstance(e, cls))
                logger.info(
                    "DOTENV_KEY #%d (%s) not usable: %s",
                    position,
                    descriptor.environment,
                    reason.replace("_", " "),
                )
                result.failures.append(
                    CandidateFailure(position, descriptor.environment, reason, e)
                )
                continue

            # Plaintext that decrypted but does not parse is decisive, not retried.
            result.mapping = parse(plaintext, lookup=self.lookup)
            result.environment = descriptor.environment
            result.position = position
            logger.info(
                "Decrypted .env.vault for environment %s (%d variables)",
                descriptor.environment,
                len(result.mapping),
            )
            return result
        return result

    def resolve_or_raise(self, raw_keys: str) -> dict[str, str]:
        result = self.resolve(raw_keys)
        if result.mapping is None:
            raise VaultResolutionFailed(result.failures)
        return result.mapping


__all__ = [
    "DECRYPTION_FAILED",
    "ENVIRONMENT_NOT_FOUND",
    "INVALID_KEY",
    "UNSUPPORTED_VERSION",
    "Resolution",
    "VaultResolver",
]
