"""
Bank CLI

Command-line interface for the bank contract.

Identity = ECDSA/secp256k1 wallet kept in ~/.bankdapp/.env. Every contract
call goes through the local wallet provider, which asks before sharing the
account and before signing each transaction (skip with --yes).

Commands:
  status    - Connect and show bank name, owner and balance
  deposit   - Deposit ETH into the bank
  withdraw  - Withdraw ETH from the bank
  rename    - Set the bank name (owner only)
  whoami    - Show current wallet address
  keygen    - Create a local wallet key
"""

from __future__ import annotations

import sys
from typing import Optional

import click
from eth_account import Account

from .config import load_config
from .logging_setup import configure_logging
from .wallet.keys import BANKDAPP_ENV, generate_key, load_private_key, save_private_key


# ============ Constants ============

VERSION = "1.0.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="bankdapp")
@click.option("--yes", "-y", is_flag=True, help="Approve wallet prompts without asking")
@click.option("--log-level", default=None, help="Logging level (default: BANK_LOG_LEVEL or WARNING)")
@click.pass_context
def cli(ctx: click.Context, yes: bool, log_level: Optional[str]) -> None:
    """Bank - deposit, withdraw and manage an on-chain bank."""
    ctx.ensure_object(dict)
    ctx.obj["yes"] = yes
    if log_level is None:
        try:
            log_level = load_config().log_level
        except ValueError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(1)
    configure_logging(log_level)


# ============ Top-level Commands ============

from .commands.status import status
from .commands.transfer import deposit, withdraw
from .commands.rename import rename

cli.add_command(status)
cli.add_command(deposit)
cli.add_command(withdraw)
cli.add_command(rename)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    private_key = load_private_key()
    if private_key is None:
        click.echo("No wallet found.")
        click.echo("Run 'bankdapp keygen' to create one.")
        sys.exit(2)
    click.echo(f"Address: {Account.from_key(private_key).address}")


@cli.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
def keygen(force: bool) -> None:
    """Create a local wallet key in ~/.bankdapp/.env."""
    if load_private_key() is not None and not force:
        click.echo("A wallet key already exists. Use --force to replace it.")
        sys.exit(1)
    private_key, address = generate_key()
    env_path = save_private_key(private_key, BANKDAPP_ENV)
    click.secho("Wallet created.", fg="green")
    click.echo(f"  Address: {address}")
    click.echo(f"  Saved:   {env_path}")


# ============ Entry Points ============


def main() -> None:
    """Bank CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
