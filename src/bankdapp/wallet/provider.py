"""
Wallet providers.

A provider is anything with an EIP-1193 style `request(method, params)`
coroutine: the bridge to the user's wallet that grants account access and
signs transactions. LocalWalletProvider plays that role for a terminal user:
the key lives in ~/.bankdapp/.env, permission prompts go through an `approve`
callback, and everything that needs the chain is forwarded to a node.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Protocol, Union

from eth_account import Account

from ..config import BankConfig
from .keys import load_private_key
from .rpc import (
    UNAUTHORIZED,
    USER_REJECTED_REQUEST,
    JsonRpcTransport,
    ProviderRpcError,
)

logger = logging.getLogger(__name__)

Approver = Callable[[str, dict], Union[bool, Awaitable[bool]]]


class WalletProvider(Protocol):
    async def request(self, method: str, params: Optional[list] = None) -> Any:
        ...


def _always_approve(method: str, details: dict) -> bool:
    return True


def _as_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value or 0)


class LocalWalletProvider:
    """EIP-1193 provider backed by a local eth-account key."""

    def __init__(
        self,
        private_key: str,
        transport: JsonRpcTransport,
        approve: Optional[Approver] = None,
        chain_id: Optional[int] = None,
        gas_limit: Optional[int] = None,
    ) -> None:
        self._account = Account.from_key(private_key)
        self._transport = transport
        self._approve = approve or _always_approve
        self._chain_id = chain_id
        self._gas_limit = gas_limit
        self._authorized = False

    @property
    def address(self) -> str:
        return self._account.address

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        if method == "eth_requestAccounts":
            return await self._request_accounts()
        if method == "eth_accounts":
            return [self.address.lower()] if self._authorized else []
        if method == "eth_chainId":
            return hex(await self._get_chain_id())
        if method == "eth_sendTransaction":
            return await self._send_transaction(dict(params[0]))
        return await self._transport.request(method, params)

    async def aclose(self) -> None:
        await self._transport.aclose()

    # -- internals --

    async def _ask(self, method: str, details: dict) -> None:
        answer = self._approve(method, details)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            raise ProviderRpcError(USER_REJECTED_REQUEST, "User rejected the request.")

    async def _request_accounts(self) -> list[str]:
        if not self._authorized:
            await self._ask("eth_requestAccounts", {"address": self.address})
            self._authorized = True
        return [self.address.lower()]

    async def _get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = _as_int(await self._transport.request("eth_chainId"))
        return self._chain_id

    async def _send_transaction(self, tx: dict) -> str:
        if not self._authorized:
            raise ProviderRpcError(UNAUTHORIZED, "Account access not granted.")
        sender = tx.get("from", self.address)
        if sender.lower() != self.address.lower():
            raise ProviderRpcError(UNAUTHORIZED, f"Unknown sender {sender}")

        call = {
            "from": self.address,
            "to": tx["to"],
            "data": tx.get("data", "0x"),
            "value": hex(_as_int(tx.get("value", 0))),
        }

        # estimateGas runs the call; a revert surfaces here as an RPC error
        gas = self._gas_limit or _as_int(
            await self._transport.request("eth_estimateGas", [call])
        )
        nonce = _as_int(
            await self._transport.request(
                "eth_getTransactionCount", [self.address, "pending"]
            )
        )
        gas_price = _as_int(await self._transport.request("eth_gasPrice"))

        unsigned = {
            "to": tx["to"],
            "data": call["data"],
            "value": _as_int(call["value"]),
            "nonce": nonce,
            "gas": gas,
            "gasPrice": gas_price,
            "chainId": await self._get_chain_id(),
        }
        await self._ask("eth_sendTransaction", unsigned)

        signed = self._account.sign_transaction(unsigned)
        raw_tx = "0x" + bytes(signed.raw_transaction).hex()
        tx_hash = await self._transport.request("eth_sendRawTransaction", [raw_tx])
        logger.info("Sent transaction %s (nonce %d)", tx_hash, nonce)
        return tx_hash


def discover_provider(
    config: BankConfig, approve: Optional[Approver] = None
) -> Optional[LocalWalletProvider]:
    """Return the local wallet provider, or None when no key is configured."""
    private_key = load_private_key()
    if private_key is None:
        logger.info("No PRIVATE_KEY configured; no wallet provider available")
        return None
    transport = JsonRpcTransport(config.rpc_url, timeout=config.rpc_timeout)
    return LocalWalletProvider(
        private_key,
        transport,
        approve=approve,
        chain_id=config.chain_id,
        gas_limit=config.gas_limit,
    )
