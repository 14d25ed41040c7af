"""
TransactionCoordinator - sequencing of state-mutating calls.

Each run_* call is one independent attempt:

    IDLE -> SUBMITTING -> AWAITING_CONFIRMATION -> SUCCEEDED | FAILED

On confirmation the dependent field is re-read and applied in one step; on
failure only `last_error` changes. A failed attempt is never resubmitted
automatically, since resubmitting creates a new on-chain transaction.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..chain.client import ChainClient, PendingTransaction, TxKind, TxStatus
from .errors import ErrorReport, ValidationError, describe
from .state import SessionState

logger = logging.getLogger(__name__)


class AttemptPhase(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AttemptResult:
    kind: TxKind
    phase: AttemptPhase
    tx_hash: Optional[str] = None
    error: Optional[ErrorReport] = None

    @property
    def succeeded(self) -> bool:
        return self.phase is AttemptPhase.SUCCEEDED


ErrorSink = Callable[[ErrorReport], None]


class TransactionCoordinator:
    """Owns SessionState updates that follow from reads and transactions."""

    def __init__(
        self,
        client: ChainClient,
        state: SessionState,
        on_error: Optional[ErrorSink] = None,
    ) -> None:
        self.client = client
        self.state = state
        self._on_error = on_error

    # ============ Failure funnel ============

    def report(self, raw: object) -> ErrorReport:
        """Classify a raw failure, record it on the session, emit it."""
        report = describe(raw)
        self.state.apply_error(report.kind)
        if self._on_error is not None:
            self._on_error(report)
        return report

    # ============ Refreshes ============

    async def refresh_balance(self) -> Optional[ErrorReport]:
        account = self.state.account
        if account is None:
            return None
        ticket = self.state.next_generation("balance")
        try:
            balance = await self.client.read_balance(account)
        except Exception as exc:  # noqa: BLE001 - funnelled to the classifier
            return self.report(exc)
        self.state.apply_balance(balance, generation=ticket)
        return None

    async def refresh_bank_name(self) -> Optional[ErrorReport]:
        ticket = self.state.next_generation("bank_name")
        try:
            name = await self.client.read_bank_name()
        except Exception as exc:  # noqa: BLE001
            return self.report(exc)
        self.state.apply_bank_name(name, generation=ticket)
        return None

    async def refresh_owner(self) -> Optional[ErrorReport]:
        try:
            owner = await self.client.read_owner()
        except Exception as exc:  # noqa: BLE001
            return self.report(exc)
        self.state.apply_owner(owner)
        return None

    # ============ Attempts ============

    async def _run(
        self,
        kind: TxKind,
        submit: Callable[[], Awaitable[PendingTransaction]],
        refresh: Callable[[], Awaitable[Optional[ErrorReport]]],
    ) -> AttemptResult:
        logger.info("%s: %s", kind.value, AttemptPhase.SUBMITTING.value)
        try:
            tx = await submit()
        except Exception as exc:  # noqa: BLE001
            report = self.report(exc)
            logger.info("%s: %s (%s)", kind.value, AttemptPhase.FAILED.value, report.kind.value)
            return AttemptResult(kind, AttemptPhase.FAILED, error=report)

        logger.info(
            "%s: %s %s", kind.value, AttemptPhase.AWAITING_CONFIRMATION.value, tx.submitted_hash
        )
        tx = await self.client.await_confirmation(tx)

        if tx.status is not TxStatus.CONFIRMED:
            report = self.report(tx.failure)
            logger.info("%s: %s (%s)", kind.value, AttemptPhase.FAILED.value, report.kind.value)
            return AttemptResult(kind, AttemptPhase.FAILED, tx.submitted_hash, report)

        # the chain state changed even if the refresh read fails
        refresh_error = await refresh()
        logger.info("%s: %s %s", kind.value, AttemptPhase.SUCCEEDED.value, tx.submitted_hash)
        return AttemptResult(kind, AttemptPhase.SUCCEEDED, tx.submitted_hash, refresh_error)

    async def run_deposit(self, amount_wei: int) -> AttemptResult:
        return await self._run(
            TxKind.DEPOSIT,
            lambda: self.client.submit_deposit(amount_wei),
            self.refresh_balance,
        )

    async def run_withdraw(self, amount_wei: int) -> AttemptResult:
        async def submit() -> PendingTransaction:
            account = self.state.account
            if account is None:
                raise ValidationError("Wallet is not connected.")
            return await self.client.submit_withdraw(account, amount_wei)

        return await self._run(TxKind.WITHDRAW, submit, self.refresh_balance)

    async def run_rename(self, name: str) -> AttemptResult:
        return await self._run(
            TxKind.RENAME,
            lambda: self.client.submit_rename(name),
            self.refresh_bank_name,
        )
