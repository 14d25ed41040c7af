"""
SessionState - the single authoritative snapshot of the bank session.

Fields are read-only from the outside; every change goes through a
transition method so that `is_owner` can never disagree with `account` and
the last known owner address.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import ErrorKind

logger = logging.getLogger(__name__)


class ConnectionStatus(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass(frozen=True)
class SessionSnapshot:
    connection_status: ConnectionStatus
    account: Optional[str]
    is_owner: bool
    owner_address: Optional[str]
    bank_name: Optional[str]
    balance_wei: Optional[int]
    last_error: Optional[ErrorKind]


Listener = Callable[[SessionSnapshot], None]


def _same_address(a: Optional[str], b: Optional[str]) -> bool:
    return a is not None and b is not None and a.lower() == b.lower()


class SessionState:
    """Mutable session, one per page/process lifetime. No persistence."""

    def __init__(self) -> None:
        self._connection_status = ConnectionStatus.DISCONNECTED
        self._account: Optional[str] = None
        self._owner_address: Optional[str] = None
        self._is_owner = False
        self._bank_name: Optional[str] = None
        self._balance_wei: Optional[int] = None
        self._last_error: Optional[ErrorKind] = None

        # refresh tickets per field: last issued / last applied
        self._issued: dict[str, int] = {"bank_name": 0, "balance": 0}
        self._applied: dict[str, int] = {"bank_name": 0, "balance": 0}

        self._listeners: list[Listener] = []

    # -- read access --

    @property
    def connection_status(self) -> ConnectionStatus:
        return self._connection_status

    @property
    def account(self) -> Optional[str]:
        return self._account

    @property
    def owner_address(self) -> Optional[str]:
        return self._owner_address

    @property
    def is_owner(self) -> bool:
        return self._is_owner

    @property
    def bank_name(self) -> Optional[str]:
        return self._bank_name

    @property
    def balance_wei(self) -> Optional[int]:
        return self._balance_wei

    @property
    def last_error(self) -> Optional[ErrorKind]:
        return self._last_error

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            connection_status=self._connection_status,
            account=self._account,
            is_owner=self._is_owner,
            owner_address=self._owner_address,
            bank_name=self._bank_name,
            balance_wei=self._balance_wei,
            last_error=self._last_error,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a snapshot after each transition.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- transitions --

    def apply_connection(self, account: str, owner_address: Optional[str]) -> None:
        if not account:
            raise ValueError("apply_connection requires an account")
        self._account = account.lower()
        self._connection_status = ConnectionStatus.CONNECTED
        if owner_address is not None:
            self._owner_address = owner_address.lower()
        self._recompute_owner()
        self._emit()

    def apply_owner(self, owner_address: str) -> None:
        self._owner_address = owner_address.lower()
        self._recompute_owner()
        self._emit()

    def next_generation(self, field_name: str) -> int:
        """Issue a ticket for a refresh of `field_name` ("bank_name" or "balance")."""
        self._issued[field_name] += 1
        return self._issued[field_name]

    def apply_bank_name(self, name: str, generation: Optional[int] = None) -> bool:
        if not self._accept("bank_name", generation):
            return False
        self._bank_name = name
        self._emit()
        return True

    def apply_balance(self, value: int, generation: Optional[int] = None) -> bool:
        if not self._accept("balance", generation):
            return False
        self._balance_wei = int(value)
        self._emit()
        return True

    def apply_error(self, kind: ErrorKind) -> None:
        self._last_error = kind
        self._emit()

    def clear_error(self) -> None:
        self._last_error = None
        self._emit()

    def disconnect(self) -> None:
        """Forget the connected account. Contract data stays displayed."""
        self._account = None
        self._connection_status = ConnectionStatus.DISCONNECTED
        self._recompute_owner()
        self._emit()

    # -- internals --

    def _recompute_owner(self) -> None:
        self._is_owner = _same_address(self._account, self._owner_address)

    def _accept(self, field_name: str, generation: Optional[int]) -> bool:
        if generation is None:
            # untagged writes supersede any refresh already in flight
            self._issued[field_name] += 1
            self._applied[field_name] = self._issued[field_name]
            return True
        if generation < self._applied[field_name]:
            logger.debug(
                "Discarding stale %s refresh (ticket %d < %d)",
                field_name,
                generation,
                self._applied[field_name],
            )
            return False
        self._applied[field_name] = generation
        return True

    def _emit(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:  # noqa: BLE001
                logger.exception("Session listener %r failed", listener)
