"""
ABI Loader - Loads the bank contract ABI shipped with the package.

Single source of truth: chain/abis/*.json (compilation artifacts with an
"abi" key). Python loads ABIs at runtime from these JSON files.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

ABI_DIR = Path(__file__).resolve().parent / "abis"


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load the ABI for a bundled contract artifact.

    Args:
        contract_name: Contract name (e.g., "Bank")

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If the artifact is not bundled
    """
    abi_path = ABI_DIR / f"{contract_name}.json"

    if not abi_path.exists():
        raise FileNotFoundError(f"ABI not found: {abi_path}")

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    return artifact["abi"]


def bank_abi() -> list[dict[str, Any]]:
    """Load Bank ABI."""
    return load_abi("Bank")
