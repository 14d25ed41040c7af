"""Helpers shared by the bank commands."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Awaitable, Callable

import click

from ..app import open_controller
from ..chain.codec import to_decimal_string
from ..config import BankConfig, load_config
from ..session.controller import BankController
from ..session.errors import EXIT_CODES, BankError, ErrorReport


def make_approver(auto_yes: bool) -> Callable[[str, dict], bool]:
    """Wallet prompts on the terminal, or silent approval with --yes."""

    def approve(method: str, details: dict) -> bool:
        if auto_yes:
            return True
        if method == "eth_requestAccounts":
            return click.confirm(
                f"Allow the bank to use wallet {details.get('address')}?",
                default=True,
            )
        if method == "eth_sendTransaction":
            click.echo(f"  To:    {details.get('to')}")
            value = int(details.get("value", 0))
            if value:
                click.echo(f"  Value: {to_decimal_string(value)} ETH")
            click.echo(f"  Gas:   {details.get('gas')}")
            return click.confirm("Sign and send this transaction?", default=False)
        return False

    return approve


def print_error(report: ErrorReport) -> None:
    click.secho(f"ERROR: {report.message}", fg="red")


def fail(report: ErrorReport) -> None:
    sys.exit(EXIT_CODES[report.kind])


def run_with_controller(
    ctx: click.Context, body: Callable[[BankController], Awaitable[Any]]
) -> Any:
    """Run `body` against a fresh session on a new event loop."""
    options = ctx.find_root().obj or {}
    approve = make_approver(options.get("yes", False))

    async def main(config: BankConfig) -> Any:
        async with open_controller(config, approve=approve) as controller:
            controller.on_error(print_error)
            return await body(controller)

    try:
        return asyncio.run(main(load_config()))
    except (BankError, ValueError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(getattr(exc, "exit_code", 1))


def format_ether(value: int | None) -> str:
    if value is None:
        return "unknown"
    return f"{to_decimal_string(value)} ETH"
