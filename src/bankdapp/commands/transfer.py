"""
Transfer - deposit and withdraw money.

Amounts are given in ETH as decimal strings ("0.5") and converted to wei
exactly. Each command connects, submits, waits for the receipt and prints
the refreshed balance.
"""

from __future__ import annotations

import click

from ..session.controller import BankController
from ..session.coordinator import AttemptResult
from .common import fail, format_ether, run_with_controller


def _finish(result: AttemptResult, balance: int | None) -> None:
    if result.tx_hash:
        click.echo(f"  TX: {result.tx_hash}")
    if not result.succeeded:
        click.secho(f"FAILED: {result.kind.value} did not go through", fg="red")
        fail(result.error)
    click.secho(f"SUCCESS: {result.kind.value} confirmed!", fg="green")
    click.echo(f"  Balance: {format_ether(balance)}")


def _transfer(ctx: click.Context, action: str, amount: str) -> None:
    async def body(controller: BankController):
        error = await controller.connect()
        if error is not None and controller.state.account is None:
            return None, error
        click.echo(f"  Wallet:  {controller.state.account}")
        click.echo(f"  Balance: {format_ether(controller.state.balance_wei)}")
        click.echo("")
        if action == "deposit":
            click.echo(f"Depositing {amount} ETH...")
            result = await controller.deposit(amount)
        else:
            click.echo(f"Withdrawing {amount} ETH...")
            result = await controller.withdraw(amount)
        return result, controller.state.balance_wei

    result, extra = run_with_controller(ctx, body)
    if result is None:
        fail(extra)
    _finish(result, extra)


@click.command()
@click.argument("amount")
@click.pass_context
def deposit(ctx: click.Context, amount: str) -> None:
    """Deposit AMOUNT ETH into the bank."""
    click.echo("=== Bank Deposit ===")
    click.echo("")
    _transfer(ctx, "deposit", amount)


@click.command()
@click.argument("amount")
@click.pass_context
def withdraw(ctx: click.Context, amount: str) -> None:
    """Withdraw AMOUNT ETH from the bank to your wallet."""
    click.echo("=== Bank Withdraw ===")
    click.echo("")
    _transfer(ctx, "withdraw", amount)
