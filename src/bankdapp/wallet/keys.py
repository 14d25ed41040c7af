"""
Local wallet key storage.

The key lives next to the CLI settings in ~/.bankdapp/.env as
PRIVATE_KEY=0x...; a PRIVATE_KEY environment variable takes precedence over
the file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key
from eth_account import Account

BANKDAPP_DIR = Path.home() / ".bankdapp"
BANKDAPP_ENV = BANKDAPP_DIR / ".env"

PRIVATE_KEY_VAR = "PRIVATE_KEY"


def generate_key() -> tuple[str, str]:
    """Create a fresh secp256k1 account; returns (0x-prefixed key, checksum address)."""
    account = Account.create()
    return "0x" + bytes(account.key).hex(), account.address


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """Store the key in the .env file, leaving the other settings in place."""
    env_path = env_path or BANKDAPP_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(mode=0o600, exist_ok=True)

    set_key(str(env_path), PRIVATE_KEY_VAR, private_key, quote_mode="never")
    if os.name != "nt":
        env_path.chmod(0o600)
    return env_path


def load_private_key(env_path: Optional[Path] = None) -> Optional[str]:
    """The configured key with a 0x prefix, or None when there is no wallet."""
    env_path = env_path or BANKDAPP_ENV
    private_key = os.environ.get(PRIVATE_KEY_VAR)
    if not private_key and env_path.exists():
        private_key = dotenv_values(env_path).get(PRIVATE_KEY_VAR)
    if not private_key:
        return None
    return private_key if private_key.startswith("0x") else "0x" + private_key
