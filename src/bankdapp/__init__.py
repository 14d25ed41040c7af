__all__ = [
    # Session
    "SessionState",
    "SessionSnapshot",
    "ConnectionStatus",
    "BankController",
    "TransactionCoordinator",
    "AttemptPhase",
    "AttemptResult",
    # Errors
    "ErrorKind",
    "ErrorReport",
    "BankError",
    "NoProviderError",
    "NotOwnerError",
    "ValidationError",
    "TransactionRevertedError",
    "classify",
    "describe",
    # Chain
    "ChainClient",
    "PendingTransaction",
    "TxKind",
    "TxStatus",
    "encode_bytes32",
    "decode_bytes32",
    "to_base_units",
    "to_decimal_string",
    # Wallet
    "WalletProvider",
    "LocalWalletProvider",
    "ProviderRpcError",
    "JsonRpcTransport",
    # Config
    "BankConfig",
    "load_config",
]

from .session.errors import (
    BankError,
    ErrorKind,
    ErrorReport,
    NoProviderError,
    NotOwnerError,
    TransactionRevertedError,
    ValidationError,
    classify,
    describe,
)
from .session.state import ConnectionStatus, SessionSnapshot, SessionState
from .chain.codec import decode_bytes32, encode_bytes32, to_base_units, to_decimal_string
from .chain.client import ChainClient, PendingTransaction, TxKind, TxStatus
from .session.coordinator import AttemptPhase, AttemptResult, TransactionCoordinator
from .session.controller import BankController
from .wallet.rpc import JsonRpcTransport, ProviderRpcError
from .wallet.provider import LocalWalletProvider, WalletProvider
from .config import BankConfig, load_config
