"""Wiring of config, wallet provider, chain client and controller."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from .chain.client import ChainClient
from .config import BankConfig
from .session.controller import BankController
from .wallet.provider import Approver, WalletProvider, discover_provider


@asynccontextmanager
async def open_controller(
    config: BankConfig,
    approve: Optional[Approver] = None,
    provider: Optional[WalletProvider] = None,
) -> AsyncIterator[BankController]:
    """Yield a controller for one session; closes the node transport after."""
    if provider is None:
        provider = discover_provider(config, approve=approve)
    client = ChainClient(
        provider,
        config.contract_address,
        poll_interval=config.poll_interval,
    )
    try:
        yield BankController(client)
    finally:
        aclose = getattr(provider, "aclose", None)
        if aclose is not None:
            await aclose()
