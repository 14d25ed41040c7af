"""Configuration loader: reads ~/.bankdapp/.env and environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .chain.codec import normalize_address
from .session.errors import ValidationError
from .wallet.keys import BANKDAPP_ENV

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_CONTRACT_ADDRESS = "0x913C3FCF7340d9Df6BCFA063f363d5aA58226dA7"


@dataclass(frozen=True)
class BankConfig:
    rpc_url: str = DEFAULT_RPC_URL
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    chain_id: Optional[int] = None
    poll_interval: float = 2.0
    rpc_timeout: float = 30.0
    gas_limit: Optional[int] = None
    log_level: str = "WARNING"


def _number(name: str, cast, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def load_config(env_path: Optional[Path] = None) -> BankConfig:
    """Build a BankConfig from the environment after loading the .env file."""
    env_path = env_path or BANKDAPP_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)
        logger.debug("Loaded environment from %s", env_path)

    contract_address = os.environ.get("BANK_CONTRACT_ADDRESS", DEFAULT_CONTRACT_ADDRESS)
    try:
        normalize_address(contract_address)
    except ValidationError:
        raise ValueError(
            f"BANK_CONTRACT_ADDRESS is not an address: {contract_address!r}"
        ) from None

    return BankConfig(
        rpc_url=os.environ.get("BANK_RPC_URL", DEFAULT_RPC_URL),
        contract_address=contract_address,
        chain_id=_number("BANK_CHAIN_ID", int, None),
        poll_interval=_number("BANK_POLL_INTERVAL", float, 2.0),
        rpc_timeout=_number("BANK_RPC_TIMEOUT", float, 30.0),
        gas_limit=_number("BANK_GAS_LIMIT", int, None),
        log_level=os.environ.get("BANK_LOG_LEVEL", "WARNING"),
    )
