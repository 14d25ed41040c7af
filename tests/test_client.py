"""Tests for ChainClient against the in-memory bank provider."""

from __future__ import annotations

import httpx
import pytest

from bankdapp.chain.client import ChainClient, TxKind, TxStatus
from bankdapp.session.errors import (
    NoProviderError,
    TransactionRevertedError,
    ValidationError,
)
from bankdapp.wallet.rpc import ProviderRpcError

from .conftest import ALICE, BOB, CONTRACT, ONE_ETHER, FakeBankProvider


class TestConnect:
    @pytest.mark.asyncio
    async def test_returns_lowercase_primary_account(self, client: ChainClient) -> None:
        account = await client.connect()
        assert account == ALICE
        assert client.account == ALICE

    @pytest.mark.asyncio
    async def test_no_provider(self) -> None:
        client = ChainClient(None, CONTRACT)
        with pytest.raises(NoProviderError):
            await client.connect()

    @pytest.mark.asyncio
    async def test_user_declines(self, provider: FakeBankProvider, client: ChainClient) -> None:
        provider.reject_accounts = True
        with pytest.raises(ProviderRpcError) as excinfo:
            await client.connect()
        assert excinfo.value.code == 4001
        assert client.account is None

    @pytest.mark.asyncio
    async def test_chain_id(self, client: ChainClient) -> None:
        assert await client.read_chain_id() == 31337


class TestReads:
    @pytest.mark.asyncio
    async def test_bank_name_decoded(self, client: ChainClient) -> None:
        assert await client.read_bank_name() == "MyBank"

    @pytest.mark.asyncio
    async def test_owner(self, provider: FakeBankProvider, client: ChainClient) -> None:
        provider.owner = BOB
        assert await client.read_owner() == BOB

    @pytest.mark.asyncio
    async def test_balance_read_as_caller(self, provider: FakeBankProvider, client: ChainClient) -> None:
        assert await client.read_balance(ALICE) == ONE_ETHER
        method, params = provider.calls[-1]
        assert method == "eth_call"
        assert params[0]["from"].lower() == ALICE
        assert params[1] == "latest"

    @pytest.mark.asyncio
    async def test_balance_of_stranger_is_zero(self, client: ChainClient) -> None:
        assert await client.read_balance(BOB) == 0

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self, provider: FakeBankProvider, client: ChainClient) -> None:
        provider.fail_on["eth_call"] = httpx.ConnectError("refused")
        with pytest.raises(httpx.ConnectError):
            await client.read_bank_name()


class TestWrites:
    @pytest.mark.asyncio
    async def test_deposit_attaches_value(self, provider: FakeBankProvider, client: ChainClient) -> None:
        await client.connect()
        tx = await client.submit_deposit(500_000_000_000_000_000)
        assert tx.kind is TxKind.DEPOSIT
        assert tx.status is TxStatus.SUBMITTED
        assert tx.submitted_hash is not None
        assert provider.sent[0]["value"] == hex(500_000_000_000_000_000)
        assert provider.sent[0]["to"].lower() == CONTRACT

    @pytest.mark.asyncio
    async def test_submit_returns_before_confirmation(self, provider: FakeBankProvider, client: ChainClient) -> None:
        await client.connect()
        await client.submit_deposit(1)
        assert provider.balances[ALICE] == ONE_ETHER

    @pytest.mark.asyncio
    async def test_negative_deposit_rejected(self, client: ChainClient) -> None:
        await client.connect()
        with pytest.raises(ValidationError):
            await client.submit_deposit(-1)

    @pytest.mark.asyncio
    async def test_rename_too_long(self, provider: FakeBankProvider, client: ChainClient) -> None:
        await client.connect()
        with pytest.raises(ValidationError):
            await client.submit_rename("x" * 33)
        assert provider.sent == []

    @pytest.mark.asyncio
    async def test_write_requires_connection(self, client: ChainClient) -> None:
        with pytest.raises(ValidationError, match="not connected"):
            await client.submit_deposit(1)


class TestConfirmation:
    @pytest.mark.asyncio
    async def test_confirmed_after_pending_polls(self, provider: FakeBankProvider, client: ChainClient) -> None:
        provider.pending_polls = 3
        await client.connect()
        tx = await client.await_confirmation(await client.submit_deposit(5))
        assert tx.status is TxStatus.CONFIRMED
        assert tx.receipt["status"] == "0x1"
        receipt_polls = [m for m, _ in provider.calls if m == "eth_getTransactionReceipt"]
        assert len(receipt_polls) == 4

    @pytest.mark.asyncio
    async def test_reverted_receipt_fails(self, client: ChainClient) -> None:
        await client.connect()
        tx = await client.submit_withdraw(ALICE, 2 * ONE_ETHER)
        tx = await client.await_confirmation(tx)
        assert tx.status is TxStatus.FAILED
        assert isinstance(tx.failure, TransactionRevertedError)

    @pytest.mark.asyncio
    async def test_provider_error_while_polling(self, provider: FakeBankProvider, client: ChainClient) -> None:
        await client.connect()
        tx = await client.submit_deposit(5)
        provider.fail_on["eth_getTransactionReceipt"] = httpx.ReadTimeout("slow node")
        tx = await client.await_confirmation(tx)
        assert tx.status is TxStatus.FAILED
        assert isinstance(tx.failure, httpx.ReadTimeout)
