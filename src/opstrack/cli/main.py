"""Main CLI entry point."""

import logging

import click
from opstrack.database.factories import create_sqlite_database
from opstrack.domain.errors import StorageError

# Import and register all commands at module level
from opstrack.cli.commands import (
    account,
    import_cmd,
    operations,
    rule,
    tag,
    triage,
)


def configure_logging(verbose: bool, debug: bool) -> None:
    """Set up logging based on verbosity flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
        force=True,
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides OPSTRACK_DB_PATH environment variable)",
    envvar="OPSTRACK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress messages")
@click.option("--debug", is_flag=True, help="Log debug messages")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool, debug: bool):
    """Opstrack - bank operation reconciliation and triage.

    Import operations, review probable duplicates and tag operations
    automatically with rules.
    """
    ctx.ensure_object(dict)
    if verbose or debug:
        configure_logging(verbose, debug)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        ctx.call_on_close(db.disconnect)
        try:
            db.initialize_schema()
        except StorageError as e:
            click.echo(f"Storage error: {e}", err=True)
            ctx.exit(2)
        ctx.obj["db"] = db


# Register all commands
account.register_commands(cli)
tag.register_commands(cli)
rule.register_commands(cli)
import_cmd.register_commands(cli)
operations.register_commands(cli)
triage.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
