"""
Loader — pick the vault or the plaintext path and populate the environment.

    DOTENV_KEY set + .env.vault present  → decrypt the vault
    otherwise                            → parse the .env file(s)

The mapping is built completely before anything is written to the
environment, so a failure at any stage leaves the environment untouched.

Usage:
    from dotenv_vault import load_dotenv
    load_dotenv()                   # existing variables win
    load_dotenv(override=True)      # file values win
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv_vault.config import LoaderConfig, get_config
from dotenv_vault.errors import DotenvNotFound
from dotenv_vault.injector import Environment, ProcessEnvironment, inject
from dotenv_vault.parser import parse_file
from dotenv_vault.vault.resolver import VaultResolver
from dotenv_vault.vault.store import VaultPayloadStore

logger = logging.getLogger(__name__)


class Loader:
    """Resolves a DotenvMapping from the configured sources."""

    def __init__(self, config: LoaderConfig | None = None) -> None:
        self.config = config or get_config()

    def values(self, environ: Environment | None = None) -> dict[str, str]:
        """Build the mapping without touching the environment."""
        env = environ if environ is not None else ProcessEnvironment()
        cfg = self.config
        vault_exists = cfg.vault_path is not None and cfg.vault_path.is_file()

        if cfg.has_key:
            if vault_exists:
                logger.info("Loading env from encrypted %s", cfg.vault_path.name)
                store = VaultPayloadStore.from_file(cfg.vault_path)
                return VaultResolver(store, lookup=env.get).resolve_or_raise(cfg.dotenv_key)
            logger.warning(
                "You set a DOTENV_KEY but you are missing a .env.vault file at %s. "
                "Did you forget to build it? Falling back to plaintext .env.",
                cfg.vault_path,
            )
        elif vault_exists:
            logger.warning(
                "Found %s but DOTENV_KEY is not set; loading plaintext .env instead.",
                cfg.vault_path,
            )
        else:
            logger.info("DOTENV_KEY is not set; loading plaintext .env")

        return self._plaintext(env)

    def _plaintext(self, env: Environment) -> dict[str, str]:
        merged: dict[str, str] = {}
        found: list[Path] = []

        def lookup(name: str) -> str | None:
            return merged[name] if name in merged else env.get(name)

        for path in self.config.env_paths:
            if not path.is_file():
                logger.debug("Skipping missing %s", path)
                continue
            merged.update(parse_file(path, lookup=lookup))
            found.append(path)

        if not found:
            raise DotenvNotFound(self.config.env_paths)
        logger.info("Loaded %d variables from %s", len(merged), ", ".join(p.name for p in found))
        return merged

    def load(self, *, override: bool = False, environ: Environment | None = None) -> dict[str, str]:
        """Resolve the mapping and inject it. Returns the mapping."""
        env = environ if environ is not None else ProcessEnvironment()
        mapping = self.values(env)
        inject(mapping, override=override, environ=env)
        return mapping


def load_dotenv(
    cwd: str | Path | None = None,
    *,
    override: bool = False,
    environ: Environment | None = None,
) -> dict[str, str]:
    """Load .env.vault (with DOTENV_KEY) or .env from ``cwd`` into the environment."""
    config = LoaderConfig.from_env(cwd) if cwd is not None else None
    return Loader(config).load(override=override, environ=environ)


def dotenv_values(cwd: str | Path | None = None) -> dict[str, str]:
    """Same resolution as load_dotenv, without changing the environment."""
    config = LoaderConfig.from_env(cwd) if cwd is not None else None
    return Loader(config).values()


__all__ = ["Loader", "dotenv_values", "load_dotenv"]
