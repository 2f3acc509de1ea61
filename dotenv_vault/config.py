"""
Configuration for the dotenv loader.

Everything is read from environment variables with defaults relative to the
working directory:

    DOTENV_KEY            comma separated vault keys (vault mode when set)
    DOTENV_VAULT_PATH     vault file              (default: <cwd>/.env.vault)
    DOTENV_CONFIG_PATH    comma separated .env files (default: <cwd>/.env)
    DOTENV_VAULT_DEBUG    verbose CLI logging

Usage:
    from dotenv_vault.config import get_config
    cfg = get_config()
    print(cfg.vault_path)    # /srv/app/.env.vault
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

KEY_VARIABLE = "DOTENV_KEY"
VAULT_FILENAME = ".env.vault"
ENV_FILENAME = ".env"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LoaderConfig:
    """Where to find the key, the vault and the plaintext fallback."""

    cwd: Path = field(default_factory=Path.cwd)
    dotenv_key: str = field(default="", repr=False)
    vault_path: Path | None = None
    env_paths: tuple[Path, ...] = ()
    debug: bool = False

    def __post_init__(self) -> None:
        # Fill path defaults from cwd; frozen, hence object.__setattr__.
        if self.vault_path is None:
            object.__setattr__(self, "vault_path", self.cwd / VAULT_FILENAME)
        if not self.env_paths:
            object.__setattr__(self, "env_paths", (self.cwd / ENV_FILENAME,))

    @property
    def has_key(self) -> bool:
        return bool(self.dotenv_key)

    @classmethod
    def from_env(cls, cwd: str | Path | None = None) -> LoaderConfig:
        base = Path(cwd) if cwd is not None else Path.cwd()

        vault_path = os.environ.get("DOTENV_VAULT_PATH")
        env_paths = [
            p.strip() for p in os.environ.get("DOTENV_CONFIG_PATH", "").split(",") if p.strip()
        ]

        return cls(
            cwd=base,
            dotenv_key=os.environ.get(KEY_VARIABLE, "").strip(),
            vault_path=base / vault_path if vault_path else None,
            env_paths=tuple(base / p for p in env_paths),
            debug=os.environ.get("DOTENV_VAULT_DEBUG", "").lower() in _TRUTHY,
        )


# Singleton
_config: LoaderConfig | None = None


def get_config() -> LoaderConfig:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = LoaderConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None


__all__ = ["KEY_VARIABLE", "LoaderConfig", "get_config", "reset_config"]
