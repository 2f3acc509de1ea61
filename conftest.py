"""
Root-level shared test fixtures.

Inherited by the vault tests under dotenv_vault/vault/tests and the suites
in tests/.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dotenv_vault.config import reset_config
from dotenv_vault.injector import MemoryEnvironment

# Known-answer vector produced by `dotenv-vault build`.
VAULT_KEY_HEX = "ddcaa26504cd70a6fef9801901c3981538563a1767c297cb8416e8a38c62fe00"
VAULT_PAYLOAD = "s7NYXa809k/bVSPwIAmJhPJmEGTtU0hG58hOZy7I0ix6y5HP8LsHBsZCYC/gw5DDFy5DgOcyd18R"
VAULT_PLAINTEXT = '# development@v6\nALPHA="zeta"'


def make_key(environment: str, key_hex: str = VAULT_KEY_HEX) -> str:
    return f"dotenv://:key_{key_hex}@dotenv.local/vault/.env.vault?environment={environment}"


@pytest.fixture
def clean_env(monkeypatch):
    """Remove env vars that change loader behaviour or leak between tests."""
    for key in [
        "DOTENV_KEY",
        "DOTENV_VAULT_PATH",
        "DOTENV_CONFIG_PATH",
        "DOTENV_VAULT_DEBUG",
        "ALPHA",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def memory_env() -> MemoryEnvironment:
    return MemoryEnvironment()


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """A directory holding a .env.vault with a production payload."""
    (tmp_path / ".env.vault").write_text(f'DOTENV_VAULT_PRODUCTION="{VAULT_PAYLOAD}"\n')
    return tmp_path
