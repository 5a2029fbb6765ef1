"""CLI error handling helpers."""

import click

from opstrack.domain.errors import DomainError, StorageError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_storage_error(ctx: click.Context, error: StorageError) -> None:
    """Render a storage failure; the whole command was rolled back."""
    click.echo(f"Storage error: {error}", err=True)
    ctx.exit(2)
