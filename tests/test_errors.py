"""Unit tests for the failure classifier."""

from __future__ import annotations

import httpx
import pytest

from bankdapp.session.errors import (
    ErrorKind,
    NoProviderError,
    NotOwnerError,
    TransactionRevertedError,
    ValidationError,
    classify,
    describe,
)
from bankdapp.wallet.rpc import ProviderRpcError


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "http://node")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("bad status", request=request, response=response)


class TestClassify:
    def test_missing_provider(self) -> None:
        assert classify(None) is ErrorKind.NO_PROVIDER
        assert classify(NoProviderError()) is ErrorKind.NO_PROVIDER

    def test_user_rejected_code(self) -> None:
        assert classify(ProviderRpcError(4001, "nope")) is ErrorKind.USER_REJECTED

    def test_user_denied_text(self) -> None:
        raw = {"message": "MetaMask Tx Signature: User denied transaction signature."}
        assert classify(raw) is ErrorKind.USER_REJECTED

    def test_revert_code(self) -> None:
        assert classify(ProviderRpcError(3, "execution reverted: not owner")) is ErrorKind.CHAIN_REVERT

    def test_revert_text(self) -> None:
        raw = ProviderRpcError(-32000, "VM Exception while processing transaction: revert")
        assert classify(raw) is ErrorKind.CHAIN_REVERT

    def test_reverted_receipt(self) -> None:
        assert classify(TransactionRevertedError("0xabc")) is ErrorKind.CHAIN_REVERT

    @pytest.mark.parametrize(
        "raw",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            ConnectionError("reset"),
            TimeoutError(),
            ProviderRpcError(4900, "Disconnected"),
            "Failed to fetch",
        ],
    )
    def test_network(self, raw: object) -> None:
        assert classify(raw) is ErrorKind.NETWORK_UNAVAILABLE

    def test_server_errors_are_network(self) -> None:
        assert classify(_status_error(503)) is ErrorKind.NETWORK_UNAVAILABLE
        assert classify(_status_error(429)) is ErrorKind.NETWORK_UNAVAILABLE

    def test_client_errors_are_unknown(self) -> None:
        assert classify(_status_error(404)) is ErrorKind.UNKNOWN

    def test_validation_is_unknown(self) -> None:
        assert classify(ValidationError("too long")) is ErrorKind.UNKNOWN

    @pytest.mark.parametrize("raw", [RuntimeError("boom"), 42, object(), {"code": "weird"}])
    def test_unrecognized(self, raw: object) -> None:
        assert classify(raw) is ErrorKind.UNKNOWN

    def test_never_raises(self) -> None:
        class Hostile:
            def __str__(self) -> str:
                raise RuntimeError("cannot render")

        assert classify(Hostile()) is ErrorKind.UNKNOWN


class TestDescribe:
    def test_revert_reason_verbatim(self) -> None:
        report = describe(ProviderRpcError(3, "execution reverted: insufficient balance"))
        assert report.kind is ErrorKind.CHAIN_REVERT
        assert report.message == "execution reverted: insufficient balance"

    def test_no_provider_message(self) -> None:
        report = describe(None)
        assert report.message == "Please install a wallet to use the bank."

    def test_validation_message_kept(self) -> None:
        report = describe(ValidationError("Name is 40 bytes long; at most 32 bytes fit."))
        assert report.kind is ErrorKind.UNKNOWN
        assert "40 bytes" in report.message

    def test_not_owner_message_kept(self) -> None:
        report = describe(NotOwnerError("Only the bank owner can rename the bank."))
        assert report.kind is ErrorKind.UNKNOWN
        assert report.message == "Only the bank owner can rename the bank."

    def test_generic_unknown_message(self) -> None:
        assert describe(RuntimeError("internal detail")).message == "Something went wrong."
