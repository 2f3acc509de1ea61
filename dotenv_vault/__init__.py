"""
dotenv-vault — load .env.vault (encrypted) or .env files into the environment.

Usage:
    from dotenv_vault import load_dotenv
    load_dotenv()       # decrypts .env.vault when DOTENV_KEY is set, else reads .env
"""

from __future__ import annotations

__version__ = "0.1.0"

from dotenv_vault.errors import DotenvVaultError
from dotenv_vault.loader import Loader, dotenv_values, load_dotenv

__all__ = ["DotenvVaultError", "Loader", "__version__", "dotenv_values", "load_dotenv"]
