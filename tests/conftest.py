"""Shared test fixtures: an in-memory wallet provider in front of a fake bank."""

from __future__ import annotations

import itertools
from typing import Any, Optional

import pytest
from eth_abi import decode, encode

from bankdapp.chain.abi import bank_abi
from bankdapp.chain.client import ChainClient
from bankdapp.chain.codec import encode_bytes32, encode_call
from bankdapp.session.controller import BankController
from bankdapp.wallet.rpc import USER_REJECTED_REQUEST, ProviderRpcError

CONTRACT = "0x913c3fcf7340d9df6bcfa063f363d5aa58226da7"
ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"
ONE_ETHER = 10**18


def _selector(name: str) -> str:
    return encode_call(bank_abi(), name, [])[:10]


SELECTORS = {
    _selector(name): name
    for name in (
        "bankName",
        "bankOwner",
        "getCustomerBalance",
        "depositMoney",
        "setBankName",
        "withdrawMoney",
    )
}


class FakeBankProvider:
    """
    EIP-1193 provider simulating the wallet and the bank contract.

    Transactions are applied when their receipt is first polled, after
    `pending_polls` empty polls. Failures can be injected per method with
    `fail_on[method] = exc`.
    """

    def __init__(
        self,
        account: str = ALICE,
        owner: str = ALICE,
        name: str = "MyBank",
        balances: Optional[dict[str, int]] = None,
    ) -> None:
        self.account = account
        self.owner = owner
        self.name = encode_bytes32(name)
        self.balances = dict(balances or {})
        self.reject_accounts = False
        self.reject_transactions = False
        self.pending_polls = 0
        self.fail_on: dict[str, Exception] = {}
        self.calls: list[tuple[str, list]] = []
        self.sent: list[dict] = []
        self._pending: dict[str, dict] = {}
        self._polls: dict[str, int] = {}
        self._receipts: dict[str, dict] = {}
        self._hashes = itertools.count(1)

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        self.calls.append((method, params))
        if method in self.fail_on:
            raise self.fail_on[method]

        if method == "eth_requestAccounts":
            if self.reject_accounts:
                raise ProviderRpcError(USER_REJECTED_REQUEST, "User rejected the request.")
            return [self.account.upper().replace("0X", "0x")]
        if method == "eth_chainId":
            return "0x7a69"
        if method == "eth_call":
            return self._call(params[0])
        if method == "eth_sendTransaction":
            if self.reject_transactions:
                raise ProviderRpcError(
                    USER_REJECTED_REQUEST, "MetaMask Tx Signature: User denied transaction signature."
                )
            tx = params[0]
            self.sent.append(tx)
            tx_hash = "0x" + format(next(self._hashes), "064x")
            self._pending[tx_hash] = tx
            self._polls[tx_hash] = 0
            return tx_hash
        if method == "eth_getTransactionReceipt":
            return self._receipt(params[0])
        raise ProviderRpcError(4200, f"Unsupported method {method}")

    # -- contract simulation --

    def _call(self, call: dict) -> str:
        name = SELECTORS[call["data"][:10]]
        sender = call.get("from", "").lower()
        if name == "bankName":
            return "0x" + encode(["bytes32"], [self.name]).hex()
        if name == "bankOwner":
            return "0x" + encode(["address"], [self.owner]).hex()
        if name == "getCustomerBalance":
            return "0x" + encode(["uint256"], [self.balances.get(sender, 0)]).hex()
        raise AssertionError(f"not a view: {name}")

    def _receipt(self, tx_hash: str) -> Optional[dict]:
        if tx_hash in self._receipts:
            return self._receipts[tx_hash]
        if self._polls[tx_hash] < self.pending_polls:
            self._polls[tx_hash] += 1
            return None
        ok = self._apply(self._pending.pop(tx_hash))
        receipt = {
            "transactionHash": tx_hash,
            "blockNumber": "0x10",
            "status": "0x1" if ok else "0x0",
        }
        self._receipts[tx_hash] = receipt
        return receipt

    def _apply(self, tx: dict) -> bool:
        name = SELECTORS[tx["data"][:10]]
        sender = tx["from"].lower()
        args = bytes.fromhex(tx["data"][10:])
        if name == "depositMoney":
            self.balances[sender] = self.balances.get(sender, 0) + int(tx["value"], 16)
            return True
        if name == "withdrawMoney":
            _to, total = decode(["address", "uint256"], args)
            if total > self.balances.get(sender, 0):
                return False
            self.balances[sender] -= total
            return True
        if name == "setBankName":
            if sender != self.owner.lower():
                return False
            (self.name,) = decode(["bytes32"], args)
            return True
        raise AssertionError(f"not a transaction: {name}")


@pytest.fixture()
def provider() -> FakeBankProvider:
    return FakeBankProvider(balances={ALICE: ONE_ETHER})


@pytest.fixture()
def client(provider: FakeBankProvider) -> ChainClient:
    return ChainClient(provider, CONTRACT, poll_interval=0)


@pytest.fixture()
def controller(client: ChainClient) -> BankController:
    return BankController(client)
