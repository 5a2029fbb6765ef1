"""Tag management commands."""

import click
from opstrack.cli.error_handling import handle_domain_error, handle_storage_error
from opstrack.cli.serialization import dumps, tag_to_dict
from opstrack.domain.errors import DomainError, StorageError
from opstrack.domain.tag import TagService


@click.group()
def tag_group():
    """Manage tags."""
    pass


@tag_group.command("create")
@click.argument("name")
@click.option("--color", help="Display color (e.g. '#ff8800')")
@click.pass_context
def create_tag(ctx, name: str, color: str | None):
    """Create a new tag."""
    db = ctx.obj["db"]
    service = TagService(db)

    try:
        tag_id = service.create_tag(name=name, color=color)
        click.echo(f"Created tag '{name.strip()}' (ID: {tag_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)


@tag_group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def list_tags(ctx, as_json: bool):
    """List all tags."""
    db = ctx.obj["db"]
    tags = TagService(db).list_tags()

    if as_json:
        click.echo(dumps([tag_to_dict(tag) for tag in tags]))
        return
    if not tags:
        click.echo("No tags found.")
        return
    for tag in tags:
        color = f" ({tag.color})" if tag.color else ""
        click.echo(f"ID: {tag.id:3d} | {tag.name}{color}")


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
