"""
Vault payload store — the parsed contents of a ``.env.vault`` file.

A vault file uses the dotenv grammar with one entry per environment:

    DOTENV_VAULT=vlt_...                  (optional vault id)
    DOTENV_VAULT_DEVELOPMENT="<payload>"
    DOTENV_VAULT_PRODUCTION="<payload>"

Payloads are opaque here; see dotenv_vault.vault.crypto. A key listed more
than once keeps its last payload, as in any dotenv file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from dotenv_vault.errors import EnvironmentNotFound, MalformedEnvFile, MalformedVault
from dotenv_vault.parser import parse
from dotenv_vault.vault.keys import VAULT_KEY_PREFIX, normalize_environment

logger = logging.getLogger(__name__)

VAULT_ID_KEY = "DOTENV_VAULT"
_ENTRY_KEY = re.compile(r"DOTENV_VAULT_[A-Z0-9_]+")


class VaultPayloadStore(Mapping[str, str]):
    """Read-only mapping of ``DOTENV_VAULT_<ENV>`` to ciphertext payload."""

    def __init__(self, payloads: Mapping[str, str], vault_id: str | None = None) -> None:
        self._payloads = MappingProxyType(dict(payloads))
        self.vault_id = vault_id

    @classmethod
    def parse(cls, text: str) -> VaultPayloadStore:
        try:
            entries = parse(text, expand=False)
        except MalformedEnvFile as e:
            raise MalformedVault(f"Line {e.line}: {e.reason}") from e

        vault_id = entries.pop(VAULT_ID_KEY, None)
        for key in entries:
            if not _ENTRY_KEY.fullmatch(key):
                raise MalformedVault(f"Unexpected key {key} in vault file")

        logger.debug("Vault holds %d environments", len(entries))
        return cls(entries, vault_id=vault_id)

    @classmethod
    def from_file(cls, path: str | Path) -> VaultPayloadStore:
        return cls.parse(Path(path).read_text(encoding="utf-8"))

    @property
    def environments(self) -> list[str]:
        return [key[len(VAULT_KEY_PREFIX) :] for key in self._payloads]

    def lookup(self, environment: str) -> str:
        """Return the payload for ``environment`` (any casing)."""
        key = VAULT_KEY_PREFIX + normalize_environment(environment)
        try:
            return self._payloads[key]
        except KeyError:
            raise EnvironmentNotFound(key) from None

    def __getitem__(self, key: str) -> str:
        return self._payloads[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._payloads)

    def __len__(self) -> int:
        return len(self._payloads)


__all__ = ["VaultPayloadStore"]
