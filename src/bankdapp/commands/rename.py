"""
Rename - set the bank name (admin panel).

Only the recorded bank owner may rename; for anyone else the command stops
before a transaction is built. The name must fit in 32 bytes of UTF-8.
"""

from __future__ import annotations

import sys

import click

from ..session.controller import BankController
from ..session.errors import NotOwnerError
from .common import fail, run_with_controller


@click.command()
@click.argument("name")
@click.pass_context
def rename(ctx: click.Context, name: str) -> None:
    """Set the bank NAME (bank owner only)."""
    click.echo("=== Bank Admin Panel ===")
    click.echo("")

    async def body(controller: BankController):
        error = await controller.connect()
        if error is not None and controller.state.account is None:
            return None, error
        click.echo(f"  Current name: {controller.state.bank_name}")
        result = await controller.rename(name)
        return result, controller.state

    result, extra = run_with_controller(ctx, body)
    if result is None:
        fail(extra)

    if result.tx_hash:
        click.echo(f"  TX: {result.tx_hash}")
    if not result.succeeded:
        if not extra.is_owner:
            sys.exit(NotOwnerError.exit_code)
        click.secho("FAILED: Rename did not go through", fg="red")
        fail(result.error)
    click.secho("SUCCESS: Bank name changed!", fg="green")
    click.echo(f"  New name: {extra.bank_name}")
