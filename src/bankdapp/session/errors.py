"""
Error taxonomy for the bank session.

Everything that crosses the provider or contract boundary is funnelled
through classify() before it may touch SessionState. The rest of the package
only ever reasons in ErrorKind values; raw failures stay in the logs.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..wallet.rpc import (
    CHAIN_DISCONNECTED,
    DISCONNECTED,
    EXECUTION_REVERTED,
    USER_REJECTED_REQUEST,
    ProviderRpcError,
)

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    NO_PROVIDER = "no_provider"
    USER_REJECTED = "user_rejected"
    CHAIN_REVERT = "chain_revert"
    NETWORK_UNAVAILABLE = "network_unavailable"
    UNKNOWN = "unknown"


# ============ Exceptions ============


class BankError(RuntimeError):
    exit_code: int = 1


class NoProviderError(BankError):
    exit_code = 2

    def __init__(self, message: str = "No wallet provider available.") -> None:
        super().__init__(message)


class ValidationError(BankError):
    exit_code = 3


class TransactionRevertedError(BankError):
    exit_code = 4

    def __init__(self, tx_hash: str, receipt: dict | None = None) -> None:
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash
        self.receipt = receipt


class NotOwnerError(BankError):
    exit_code = 7


EXIT_CODES = {
    ErrorKind.UNKNOWN: 1,
    ErrorKind.NO_PROVIDER: NoProviderError.exit_code,
    ErrorKind.CHAIN_REVERT: TransactionRevertedError.exit_code,
    ErrorKind.USER_REJECTED: 5,
    ErrorKind.NETWORK_UNAVAILABLE: 6,
}


# ============ Classification ============

_REJECT_PATTERNS = ("user rejected", "user denied", "rejected by user", "user cancelled")
_REVERT_PATTERNS = ("execution reverted", "revert", "vm exception")
_NETWORK_PATTERNS = (
    "network",
    "timeout",
    "timed out",
    "connection",
    "unavailable",
    "failed to fetch",
    "econnrefused",
)

_NETWORK_EXCEPTIONS = (
    httpx.TransportError,
    ConnectionError,
    TimeoutError,
    OSError,
)


def _failure_text(raw: Any) -> str:
    if isinstance(raw, dict):
        return json.dumps(raw, default=str).lower()
    if isinstance(raw, ProviderRpcError):
        return f"{raw.message} {raw.data or ''}".lower()
    return str(raw or "").lower()


def _failure_code(raw: Any) -> int | None:
    if isinstance(raw, ProviderRpcError):
        return raw.code
    if isinstance(raw, dict):
        code = raw.get("code")
        if isinstance(code, int):
            return code
    return None


def _classify(raw: Any) -> ErrorKind:
    if raw is None or isinstance(raw, NoProviderError):
        return ErrorKind.NO_PROVIDER
    if isinstance(raw, (ValidationError, NotOwnerError, ValueError, UnicodeError)):
        return ErrorKind.UNKNOWN
    if isinstance(raw, TransactionRevertedError):
        return ErrorKind.CHAIN_REVERT
    if isinstance(raw, httpx.HTTPStatusError):
        status = raw.response.status_code
        if status >= 500 or status == 429:
            return ErrorKind.NETWORK_UNAVAILABLE
        return ErrorKind.UNKNOWN
    if isinstance(raw, _NETWORK_EXCEPTIONS):
        return ErrorKind.NETWORK_UNAVAILABLE

    code = _failure_code(raw)
    text = _failure_text(raw)

    if code == USER_REJECTED_REQUEST or any(p in text for p in _REJECT_PATTERNS):
        return ErrorKind.USER_REJECTED
    if code == EXECUTION_REVERTED or any(p in text for p in _REVERT_PATTERNS):
        return ErrorKind.CHAIN_REVERT
    if code in (DISCONNECTED, CHAIN_DISCONNECTED) or any(
        p in text for p in _NETWORK_PATTERNS
    ):
        return ErrorKind.NETWORK_UNAVAILABLE
    return ErrorKind.UNKNOWN


def classify(raw: Any) -> ErrorKind:
    """
    Map a raw provider/chain failure to an ErrorKind.

    Best-effort pattern match over whatever the provider surfaced: a missing
    provider, an EIP-1193 user-decline code, a transport/timeout failure, a
    revert reason, or free-form text. Never raises.
    """
    try:
        return _classify(raw)
    except Exception:  # noqa: BLE001 - the classifier is total
        logger.exception("Error classifier failed on %r", raw)
        return ErrorKind.UNKNOWN


# ============ Reports ============


@dataclass(frozen=True)
class ErrorReport:
    kind: ErrorKind
    message: str


_MESSAGES = {
    ErrorKind.NO_PROVIDER: "Please install a wallet to use the bank.",
    ErrorKind.USER_REJECTED: "Request rejected in the wallet.",
    ErrorKind.NETWORK_UNAVAILABLE: "Network unavailable. Try again.",
    ErrorKind.UNKNOWN: "Something went wrong.",
}


def _revert_reason(raw: Any) -> str:
    if isinstance(raw, ProviderRpcError):
        return raw.message
    if isinstance(raw, dict):
        return str(raw.get("message") or raw)
    return str(raw) or "Transaction reverted"


def describe(raw: Any) -> ErrorReport:
    """Classify a failure and pair it with a display message."""
    kind = classify(raw)
    if kind is ErrorKind.CHAIN_REVERT:
        try:
            message = _revert_reason(raw)
        except Exception:  # noqa: BLE001
            message = "Transaction reverted"
    elif kind is ErrorKind.UNKNOWN and isinstance(raw, (ValidationError, NotOwnerError)):
        message = str(raw)
    else:
        message = _MESSAGES[kind]

    if kind is ErrorKind.UNKNOWN:
        logger.error("Unclassified failure: %r", raw)
    else:
        logger.info("Classified failure as %s: %s", kind.value, message)
    return ErrorReport(kind=kind, message=message)
