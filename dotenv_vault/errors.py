"""
Error taxonomy for dotenv-vault.

Every error carries a stable ``code`` prefix, matching the codes printed by
the rest of the dotenv-vault tooling, so messages stay greppable:

    INVALID_DOTENV_KEY            — key string cannot be parsed or decoded
    NOT_FOUND_DOTENV_ENVIRONMENT  — vault has no payload for the environment
    DECRYPTION_FAILED             — payload did not decrypt under the key
    INVALID_DOTENV_VAULT          — vault file is not a valid vault
    INVALID_DOTENV_FILE           — plaintext does not follow the grammar
    NOT_FOUND_DOTENV_FILE         — no plaintext .env file to fall back to

Messages never include key material or variable values.
"""

from __future__ import annotations

from dataclasses import dataclass


class DotenvVaultError(Exception):
    """Base class for every error raised by this package."""

    code = "DOTENV_VAULT_ERROR"

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(f"{self.code}: {message}" if message else self.code)


class MalformedKey(DotenvVaultError):
    code = "INVALID_DOTENV_KEY"


class NoValidKeys(DotenvVaultError):
    code = "INVALID_DOTENV_KEY"

    def __init__(self, rejected: int = 0) -> None:
        self.rejected = rejected
        super().__init__(f"No valid key in DOTENV_KEY ({rejected} rejected)")


class MalformedVault(DotenvVaultError):
    code = "INVALID_DOTENV_VAULT"


class EnvironmentNotFound(DotenvVaultError):
    code = "NOT_FOUND_DOTENV_ENVIRONMENT"

    def __init__(self, environment: str) -> None:
        self.environment = environment
        super().__init__(
            f"Cannot locate environment {environment} in your .env.vault file. "
            "Run 'npx dotenv-vault build' to include it."
        )


class DecryptionFailed(DotenvVaultError):
    code = "DECRYPTION_FAILED"

    def __init__(self, message: str = "Please check your DOTENV_KEY") -> None:
        super().__init__(message)


class UnsupportedVersion(DotenvVaultError):
    code = "DECRYPTION_FAILED"

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"Unsupported payload version {version!r}")


class MalformedEnvFile(DotenvVaultError):
    code = "INVALID_DOTENV_FILE"

    def __init__(self, line: int, reason: str = "unrecognized line") -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Line {line}: {reason}")


class DotenvNotFound(DotenvVaultError, FileNotFoundError):
    code = "NOT_FOUND_DOTENV_FILE"

    def __init__(self, paths) -> None:
        self.paths = [str(p) for p in paths]
        DotenvVaultError.__init__(self, f"Cannot find any of: {', '.join(self.paths)}")


@dataclass(frozen=True)
class CandidateFailure:
    """Why one candidate key did not unlock the vault."""

    position: int  # 1-based, among the usable keys
    environment: str
    reason: str
    error: DotenvVaultError

    def describe(self) -> str:
        return f"key #{self.position} ({self.environment}): {self.reason.replace('_', ' ')}"


class VaultResolutionFailed(DotenvVaultError):
    code = "DECRYPTION_FAILED"

    def __init__(self, failures: list[CandidateFailure]) -> None:
        self.failures = list(failures)
        detail = "; ".join(f.describe() for f in self.failures) or "no candidates"
        super().__init__(f"No key could decrypt the vault ({detail})")

    @property
    def reasons(self) -> list[str]:
        return [f.reason for f in self.failures]


__all__ = [
    "CandidateFailure",
    "DecryptionFailed",
    "DotenvNotFound",
    "DotenvVaultError",
    "EnvironmentNotFound",
    "MalformedEnvFile",
    "MalformedKey",
    "MalformedVault",
    "NoValidKeys",
    "UnsupportedVersion",
    "VaultResolutionFailed",
]
