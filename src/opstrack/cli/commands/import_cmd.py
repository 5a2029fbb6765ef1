"""Operation import command."""

import click
from opstrack.cli.error_handling import handle_domain_error, handle_storage_error
from opstrack.domain.account import BankAccountService
from opstrack.domain.errors import DomainError, StorageError
from opstrack.domain.operation_import import OperationImportService
from opstrack.utils.account_resolver import resolve_account


@click.command("import")
@click.argument("json_file", type=click.Path(exists=True))
@click.option("--account", required=True, help="Bank account name, slug or ID")
@click.pass_context
def import_operations(ctx, json_file: str, account: str):
    """Import operations from a JSON file.

    The file holds an array of records with date, type, type_display,
    details, amount (or amount_in_cents) and optionally hash. Operations
    sharing a hash are flagged for triage, and tag rules are applied to
    untagged operations.
    """
    db = ctx.obj["db"]
    service = OperationImportService(db)

    try:
        account_id = resolve_account(BankAccountService(db), account)
        result = service.import_json(json_file_path=json_file, bank_account_id=account_id)
        click.echo("\nImport complete:")
        click.echo(f"  Imported: {result['inserted']} operations")
        click.echo(f"  Flagged for triage: {result['flagged']}")
        click.echo(f"  Tagged by rules: {result['tagged']}")
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_operations)
