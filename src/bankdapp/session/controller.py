"""
BankController - the intent surface consumed by a UI.

Turns user intents (connect, refresh, deposit/withdraw an amount string,
rename) into reads and coordinated transactions. User input is parsed here,
and the rename intent is gated on ownership here, before the coordinator is
ever involved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from ..chain.client import ChainClient, TxKind
from ..chain.codec import to_base_units
from .coordinator import AttemptPhase, AttemptResult, TransactionCoordinator
from .errors import ErrorReport, NotOwnerError, ValidationError
from .state import Listener, SessionSnapshot, SessionState

logger = logging.getLogger(__name__)


class BankController:
    def __init__(self, client: ChainClient, state: Optional[SessionState] = None) -> None:
        self.state = state or SessionState()
        self._error_listeners: list[Callable[[ErrorReport], None]] = []
        self.coordinator = TransactionCoordinator(client, self.state, on_error=self._emit_error)
        self.client = client

    # ============ Output streams ============

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.state.subscribe(listener)

    def on_error(self, listener: Callable[[ErrorReport], None]) -> None:
        self._error_listeners.append(listener)

    def snapshot(self) -> SessionSnapshot:
        return self.state.snapshot()

    def acknowledge_error(self) -> None:
        self.state.clear_error()

    def _emit_error(self, report: ErrorReport) -> None:
        for listener in list(self._error_listeners):
            listener(report)

    # ============ Intents ============

    async def connect(self) -> Optional[ErrorReport]:
        """Connect the wallet, then load owner, bank name and balance."""
        try:
            account = await self.client.connect()
        except Exception as exc:  # noqa: BLE001
            return self.coordinator.report(exc)

        owner_error = None
        try:
            owner = await self.client.read_owner()
        except Exception as exc:  # noqa: BLE001
            owner = None
            owner_error = exc
        self.state.apply_connection(account, owner)
        if owner_error is not None:
            self.coordinator.report(owner_error)

        errors = await asyncio.gather(
            self.coordinator.refresh_bank_name(),
            self.coordinator.refresh_balance(),
        )
        return next((e for e in errors if e is not None), None)

    async def refresh(self) -> Optional[ErrorReport]:
        """Re-read everything displayed; the balance only when connected."""
        errors = await asyncio.gather(
            self.coordinator.refresh_bank_name(),
            self.coordinator.refresh_owner(),
            self.coordinator.refresh_balance(),
        )
        return next((e for e in errors if e is not None), None)

    async def deposit(self, amount: str) -> AttemptResult:
        try:
            amount_wei = to_base_units(amount)
        except ValidationError as exc:
            return AttemptResult(TxKind.DEPOSIT, AttemptPhase.FAILED, error=self.coordinator.report(exc))
        return await self.coordinator.run_deposit(amount_wei)

    async def withdraw(self, amount: str) -> AttemptResult:
        try:
            amount_wei = to_base_units(amount)
        except ValidationError as exc:
            return AttemptResult(TxKind.WITHDRAW, AttemptPhase.FAILED, error=self.coordinator.report(exc))
        return await self.coordinator.run_withdraw(amount_wei)

    async def rename(self, name: str) -> AttemptResult:
        """Rename the bank; refused locally unless the account is the recorded owner."""
        if not self.state.is_owner:
            logger.warning("Rename refused: %s is not the bank owner", self.state.account)
            error = self.coordinator.report(NotOwnerError("Only the bank owner can rename the bank."))
            return AttemptResult(TxKind.RENAME, AttemptPhase.FAILED, error=error)
        return await self.coordinator.run_rename(name)
