"""Operation listing commands."""

import click
from opstrack.cli.date_filters import resolve_cli_date_bounds
from opstrack.cli.error_handling import handle_domain_error
from opstrack.cli.serialization import dumps, operation_to_dict
from opstrack.domain.entities import Operation
from opstrack.domain.errors import DomainError
from opstrack.domain.operation import OperationService
from opstrack.utils.amount_parser import format_cents


def format_operation_line(operation: Operation) -> str:
    """Render an operation as one table row."""
    marker = "!" if operation.needs_triage else " "
    details = operation.details[:40]
    tags = ",".join(str(t) for t in sorted(operation.tags_ids))
    return (
        f"{marker} {operation.id:5d} | {operation.date:10s} | {operation.type_display[:12]:12s} | "
        f"{details:40s} | {format_cents(operation.amount_in_cents):>10s} | {tags}"
    )


def echo_operations(operations: list[Operation], as_json: bool, empty_message: str) -> None:
    if as_json:
        click.echo(dumps([operation_to_dict(op) for op in operations]))
        return
    if not operations:
        click.echo(empty_message)
        return
    for operation in operations:
        click.echo(format_operation_line(operation))


@click.group()
def operations_group():
    """Browse operations."""
    pass


@operations_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def list_operations(ctx, start_date: str | None, end_date: str | None, as_json: bool):
    """List operations, newest first. '!' marks operations pending triage."""
    db = ctx.obj["db"]
    start, end = resolve_cli_date_bounds(ctx, start_date=start_date, end_date=end_date)
    operations = OperationService(db).find_all(start_date=start, end_date=end)
    echo_operations(operations, as_json, "No operations found.")


@operations_group.command("show")
@click.argument("operation_id", type=int)
@click.pass_context
def show_operation(ctx, operation_id: int):
    """Show one operation as JSON."""
    db = ctx.obj["db"]
    try:
        operation = OperationService(db).find_by_id(operation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(dumps(operation_to_dict(operation)))


@operations_group.command("triage")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def list_triage(ctx, as_json: bool):
    """List operations pending triage, similar details grouped together."""
    db = ctx.obj["db"]
    operations = OperationService(db).find_triage()
    echo_operations(operations, as_json, "Nothing to triage.")


def register_commands(cli):
    """Register operation commands with main CLI."""
    cli.add_command(operations_group, name="operations")
