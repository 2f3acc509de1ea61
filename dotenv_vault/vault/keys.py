"""
DOTENV_KEY parsing.

A key looks like:

    dotenv://:key_<64 hex>@dotenv.org/vault/.env.vault?environment=production

The URL password carries the key material and the ``environment`` query
parameter selects the vault payload. DOTENV_KEY may hold several keys
separated by commas (e.g. the current and the previous key during a
rotation); they are tried in the order given.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlsplit

from dotenv_vault.errors import MalformedKey, NoValidKeys

logger = logging.getLogger(__name__)

KEY_SCHEME = "dotenv"
VAULT_KEY_PREFIX = "DOTENV_VAULT_"


def normalize_environment(environment: str) -> str:
    """``production`` -> ``PRODUCTION``, ``ci-east`` -> ``CI_EAST``."""
    return re.sub(r"[^A-Z0-9]+", "_", environment.upper())


@dataclass(frozen=True)
class KeyDescriptor:
    """One parsed DOTENV_KEY entry. The key material is kept out of repr()."""

    key_material: str = field(repr=False)
    environment: str

    @property
    def vault_key(self) -> str:
        return VAULT_KEY_PREFIX + normalize_environment(self.environment)

    @classmethod
    def parse(cls, raw: str) -> KeyDescriptor:
        """Validate and parse a single key string. Raises MalformedKey."""
        try:
            url = urlsplit(raw.strip())
            password = url.password
        except ValueError:
            raise MalformedKey("Failed to parse url") from None

        if url.scheme != KEY_SCHEME:
            raise MalformedKey("Invalid scheme")
        if not password:
            raise MalformedKey("Missing key part")

        environments = parse_qs(url.query).get("environment")
        if not environments:
            raise MalformedKey("Missing environment part")

        return cls(key_material=password, environment=environments[0])


def split_keys(raw: str) -> list[str]:
    """Split a comma separated key list, dropping blank entries."""
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_key_candidates(raw: str) -> list[KeyDescriptor]:
    """Parse every key in ``raw``, in order, skipping malformed ones.

    Raises NoValidKeys when nothing usable remains.
    """
    candidates: list[KeyDescriptor] = []
    rejected = 0
    for position, item in enumerate(split_keys(raw), start=1):
        try:
            candidates.append(KeyDescriptor.parse(item))
        except MalformedKey as e:
            rejected += 1
            logger.warning("Ignoring DOTENV_KEY entry #%d: %s", position, e.message)

    if not candidates:
        raise NoValidKeys(rejected)
    return candidates


__all__ = [
    "KeyDescriptor",
    "normalize_environment",
    "parse_key_candidates",
    "split_keys",
]
