"""Bank account management commands."""

import click
from opstrack.cli.error_handling import handle_domain_error, handle_storage_error
from opstrack.domain.account import BankAccountService
from opstrack.domain.errors import DomainError, StorageError


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--slug", help="Short identifier (derived from the name if not provided)")
@click.option("--currency", default="EUR", show_default=True, help="Currency code")
@click.pass_context
def create_account(ctx, name: str, slug: str | None, currency: str):
    """Create a new bank account.

    Examples:
        opstrack account create "Main Checking"
        opstrack account create "Savings" --slug sav --currency USD
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    try:
        account_id = service.create_account(name=name, slug=slug, currency=currency)
        account = service.get_account(account_id)
        click.echo(f"Created account '{account.name}' (ID: {account_id}, slug: {account.slug})")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all bank accounts."""
    db = ctx.obj["db"]
    service = BankAccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.slug:12s} | {acc.currency}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
