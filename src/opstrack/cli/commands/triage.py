"""Triage workflow commands: resolve, delete, detect, retag."""

import click
from opstrack.cli.error_handling import handle_domain_error, handle_storage_error
from opstrack.domain.errors import DomainError, StorageError
from opstrack.domain.tag_rules import TagRuleService
from opstrack.domain.triage import TriageService


@click.command("resolve")
@click.argument("operation_id", type=int)
@click.argument("details")
@click.pass_context
def resolve_operation(ctx, operation_id: int, details: str):
    """Set an operation's details and mark it as reviewed.

    Editing counts as confirmation: the operation leaves triage even if
    other operations still share its hash.
    """
    db = ctx.obj["db"]
    try:
        TriageService(db).resolve_via_edit(operation_id, details)
        click.echo(f"Operation {operation_id} resolved")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


@click.command("delete")
@click.argument("operation_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_operation(ctx, operation_id: int, yes: bool):
    """Delete an operation, e.g. a confirmed duplicate.

    Remaining operations of the same hash group are not re-checked and
    stay pending until resolved.
    """
    db = ctx.obj["db"]
    if not yes:
        click.confirm(f"Delete operation {operation_id}?", abort=True)
    try:
        TriageService(db).delete(operation_id)
        click.echo(f"Deleted operation {operation_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


@click.command("detect")
@click.pass_context
def detect_collisions(ctx):
    """Flag operations that share a hash for triage."""
    db = ctx.obj["db"]
    try:
        flagged = TriageService(db).refresh()
        click.echo(f"Flagged {flagged} operation(s) for triage")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


@click.command("retag")
@click.option("--all", "retag_all", is_flag=True, help="Also re-evaluate operations that already have tags")
@click.pass_context
def retag_operations(ctx, retag_all: bool):
    """Apply tag rules to stored operations."""
    db = ctx.obj["db"]
    try:
        tagged = TagRuleService(db).apply_rules(only_untagged=not retag_all)
        click.echo(f"Tagged {tagged} operation(s)")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


def register_commands(cli):
    """Register triage commands with main CLI."""
    cli.add_command(resolve_operation)
    cli.add_command(delete_operation)
    cli.add_command(detect_collisions)
    cli.add_command(retag_operations)
