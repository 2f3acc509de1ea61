"""Tests for the vault payload store."""

from pathlib import Path

import pytest
from conftest import VAULT_PAYLOAD

from dotenv_vault.errors import EnvironmentNotFound, MalformedVault
from dotenv_vault.vault.store import VaultPayloadStore

VAULT_FILE = f"""\
#/-------------------.env.vault---------------------/
#/         cloud-agnostic vaulting standard         /
#/--------------------------------------------------/
DOTENV_VAULT=vlt_1234

# development
DOTENV_VAULT_DEVELOPMENT="{VAULT_PAYLOAD}"

# production
DOTENV_VAULT_PRODUCTION="v1.00112233445566778899aabb.AAAA"
"""


class TestParse:
    def test_environments(self):
        store = VaultPayloadStore.parse(VAULT_FILE)
        assert store.environments == ["DEVELOPMENT", "PRODUCTION"]
        assert store.vault_id == "vlt_1234"
        assert len(store) == 2

    def test_lookup_normalizes(self):
        store = VaultPayloadStore.parse(VAULT_FILE)
        assert store.lookup("development") == VAULT_PAYLOAD
        assert store.lookup("Production").startswith("v1.")

    def test_lookup_missing(self):
        store = VaultPayloadStore.parse(VAULT_FILE)
        with pytest.raises(EnvironmentNotFound) as exc:
            store.lookup("staging")
        assert exc.value.environment == "DOTENV_VAULT_STAGING"

    def test_duplicate_last_wins(self):
        store = VaultPayloadStore.parse("DOTENV_VAULT_CI=first\nDOTENV_VAULT_CI=second\n")
        assert store.lookup("ci") == "second"
        assert len(store) == 1

    def test_dollar_signs_kept(self):
        store = VaultPayloadStore.parse("DOTENV_VAULT_CI=abc$DEF\n")
        assert store.lookup("ci") == "abc$DEF"

    def test_unexpected_key(self):
        with pytest.raises(MalformedVault, match="SECRET"):
            VaultPayloadStore.parse("DOTENV_VAULT_CI=x\nSECRET=plaintext\n")

    def test_bad_grammar(self):
        with pytest.raises(MalformedVault, match="Line 2"):
            VaultPayloadStore.parse("DOTENV_VAULT_CI=x\nnot a line\n")

    def test_empty(self):
        store = VaultPayloadStore.parse("")
        assert store.environments == []

    def test_read_only(self):
        store = VaultPayloadStore.parse(VAULT_FILE)
        with pytest.raises(TypeError):
            store["DOTENV_VAULT_CI"] = "x"  # type: ignore[index]


class TestFromFile:
    def test_reads_file(self, vault_dir: Path):
        store = VaultPayloadStore.from_file(vault_dir / ".env.vault")
        assert store.lookup("production") == VAULT_PAYLOAD

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            VaultPayloadStore.from_file(tmp_path / ".env.vault")
