"""Tests for dotenv_vault.errors."""

from dotenv_vault.errors import (
    CandidateFailure,
    DecryptionFailed,
    DotenvNotFound,
    DotenvVaultError,
    EnvironmentNotFound,
    MalformedKey,
    VaultResolutionFailed,
)


class TestErrors:
    def test_code_prefix(self):
        assert str(MalformedKey("Invalid scheme")) == "INVALID_DOTENV_KEY: Invalid scheme"
        assert str(DecryptionFailed()).startswith("DECRYPTION_FAILED:")

    def test_environment_not_found(self):
        e = EnvironmentNotFound("DOTENV_VAULT_STAGING")
        assert e.environment == "DOTENV_VAULT_STAGING"
        assert "DOTENV_VAULT_STAGING" in str(e)

    def test_dotenv_not_found_is_file_not_found(self):
        e = DotenvNotFound(["/app/.env", "/app/.env.local"])
        assert isinstance(e, FileNotFoundError)
        assert isinstance(e, DotenvVaultError)
        assert "/app/.env.local" in str(e)

    def test_aggregate(self):
        failures = [
            CandidateFailure(1, "staging", "environment_not_found", EnvironmentNotFound("X")),
            CandidateFailure(2, "production", "decryption_failed", DecryptionFailed()),
        ]
        e = VaultResolutionFailed(failures)
        assert e.reasons == ["environment_not_found", "decryption_failed"]
        assert "key #1 (staging): environment not found" in str(e)
        assert "key #2 (production): decryption failed" in str(e)
