"""
ChainClient - read and write calls against the bank contract.

Every write returns a PendingTransaction handle as soon as the provider has
accepted it; waiting for confirmation is a separate step so the caller
decides when to suspend on it.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..session.errors import NoProviderError, TransactionRevertedError, ValidationError
from ..wallet.provider import WalletProvider
from .abi import bank_abi
from .codec import (
    decode_bytes32,
    decode_result,
    encode_bytes32,
    encode_call,
    normalize_address,
    to_checksum_address,
)

logger = logging.getLogger(__name__)


class TxKind(str, enum.Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    RENAME = "rename"


class TxStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class PendingTransaction:
    kind: TxKind
    submitted_hash: Optional[str] = None
    status: TxStatus = TxStatus.SUBMITTED
    receipt: Optional[dict] = None
    failure: Any = field(default=None, repr=False)


def _receipt_status(receipt: dict) -> int:
    status = receipt.get("status", "0x0")
    if isinstance(status, str):
        return int(status, 16)
    return int(status)


class ChainClient:
    """Wraps one wallet provider and the bank contract at one address."""

    def __init__(
        self,
        provider: Optional[WalletProvider],
        contract_address: str,
        abi: Optional[list] = None,
        poll_interval: float = 2.0,
    ) -> None:
        self._provider = provider
        self.contract_address = to_checksum_address(contract_address)
        self._abi = abi if abi is not None else bank_abi()
        self.poll_interval = poll_interval
        self._account: Optional[str] = None

    @property
    def account(self) -> Optional[str]:
        return self._account

    def _require_provider(self) -> WalletProvider:
        if self._provider is None:
            raise NoProviderError("Please install a wallet to use the bank.")
        return self._provider

    # ============ Connection ============

    async def connect(self) -> str:
        """Request account access; returns the primary account, lowercased."""
        provider = self._require_provider()
        accounts = await provider.request("eth_requestAccounts")
        if not accounts:
            raise ValidationError("Wallet returned no accounts")
        self._account = normalize_address(accounts[0])
        logger.info("Connected account %s", self._account)
        return self._account

    async def read_chain_id(self) -> int:
        provider = self._require_provider()
        return int(await provider.request("eth_chainId"), 16)

    # ============ Reads ============

    async def _read(
        self, function_name: str, from_account: Optional[str] = None
    ) -> Any:
        provider = self._require_provider()
        call = {
            "to": self.contract_address,
            "data": encode_call(self._abi, function_name, []),
        }
        if from_account is not None:
            call["from"] = to_checksum_address(from_account)
        result = await provider.request("eth_call", [call, "latest"])
        return decode_result(self._abi, function_name, result)

    async def read_bank_name(self) -> str:
        raw = await self._read("bankName")
        return decode_bytes32(bytes(raw))

    async def read_owner(self) -> str:
        return normalize_address(await self._read("bankOwner"))

    async def read_balance(self, for_account: str) -> int:
        # getCustomerBalance() is keyed by msg.sender
        return int(await self._read("getCustomerBalance", from_account=for_account))

    # ============ Writes ============

    async def _submit(
        self, kind: TxKind, function_name: str, args: list, value: int = 0
    ) -> PendingTransaction:
        provider = self._require_provider()
        if self._account is None:
            raise ValidationError("Wallet is not connected.")

        tx = {
            "from": to_checksum_address(self._account),
            "to": self.contract_address,
            "data": encode_call(self._abi, function_name, args),
            "value": hex(value),
        }
        tx_hash = await provider.request("eth_sendTransaction", [tx])
        logger.info("Submitted %s transaction %s", kind.value, tx_hash)
        return PendingTransaction(kind=kind, submitted_hash=tx_hash)

    async def submit_rename(self, new_name: str) -> PendingTransaction:
        encoded = encode_bytes32(new_name)
        return await self._submit(TxKind.RENAME, "setBankName", [encoded])

    async def submit_deposit(self, amount_wei: int) -> PendingTransaction:
        if not isinstance(amount_wei, int) or amount_wei < 0:
            raise ValidationError(f"Deposit must be a non-negative integer, got {amount_wei!r}")
        return await self._submit(TxKind.DEPOSIT, "depositMoney", [], value=amount_wei)

    async def submit_withdraw(self, to_account: str, amount_wei: int) -> PendingTransaction:
        if not isinstance(amount_wei, int) or amount_wei < 0:
            raise ValidationError(f"Withdrawal must be a non-negative integer, got {amount_wei!r}")
        return await self._submit(
            TxKind.WITHDRAW,
            "withdrawMoney",
            [to_checksum_address(to_account), amount_wei],
        )

    # ============ Confirmation ============

    async def await_confirmation(self, tx: PendingTransaction) -> PendingTransaction:
        """
        Wait until the transaction is mined or the provider gives up.

        No client-side timeout. A receipt with status 1 confirms the
        transaction, status 0 fails it as a revert; a provider error while
        polling fails it with that error.
        """
        provider = self._require_provider()
        try:
            while True:
                receipt = await provider.request(
                    "eth_getTransactionReceipt", [tx.submitted_hash]
                )
                if receipt is not None:
                    break
                await asyncio.sleep(self.poll_interval)
        except Exception as exc:  # noqa: BLE001 - folded into the handle
            logger.warning("Lost track of %s: %s", tx.submitted_hash, exc)
            tx.status = TxStatus.FAILED
            tx.failure = exc
            return tx

        tx.receipt = receipt
        if _receipt_status(receipt) == 1:
            tx.status = TxStatus.CONFIRMED
            logger.info("Confirmed %s in block %s", tx.submitted_hash, receipt.get("blockNumber"))
        else:
            tx.status = TxStatus.FAILED
            tx.failure = TransactionRevertedError(tx.submitted_hash, receipt)
            logger.warning("Transaction %s reverted", tx.submitted_hash)
        return tx
