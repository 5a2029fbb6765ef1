"""CLI helpers for date range resolution."""

import click

from opstrack.utils.date_parser import parse_date, to_iso


def resolve_cli_date_bounds(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
) -> tuple[str | None, str | None]:
    """Parse --start-date/--end-date into ISO bounds, or exit with a CLI error."""
    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date is after end date.", err=True)
        ctx.exit(1)

    return to_iso(start), to_iso(end)
