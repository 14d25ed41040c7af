"""
Status - connect the wallet and show what the bank knows about you.

Flow:
1. Request account access from the wallet
2. Read the bank owner and decide whether you administer the bank
3. Read the bank name and your balance
"""

from __future__ import annotations

import sys

import click

from ..session.controller import BankController
from ..session.errors import EXIT_CODES
from .common import format_ether, run_with_controller


def show_snapshot(controller: BankController) -> None:
    snap = controller.snapshot()
    name = snap.bank_name
    if name == "" and snap.is_owner:
        name = click.style("Set up the name of your bank.", fg="yellow")
    click.echo(f"  Bank:     {name if name is not None else 'unknown'}")
    click.echo(f"  Owner:    {snap.owner_address or 'unknown'}")
    click.echo(f"  Wallet:   {snap.account or 'not connected'}")
    click.echo(f"  Balance:  {format_ether(snap.balance_wei)}")
    if snap.is_owner:
        click.secho("  You are the bank owner.", fg="cyan")


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Connect the wallet and show bank name, owner and balance."""
    click.echo("=== Bank Status ===")
    click.echo("")

    async def body(controller: BankController):
        error = await controller.connect()
        show_snapshot(controller)
        return error

    error = run_with_controller(ctx, body)
    if error is not None:
        sys.exit(EXIT_CODES[error.kind])
