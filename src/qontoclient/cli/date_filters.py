"""CLI helpers for date range resolution."""

import click

from qontoclient.domain.entities import DateRange
from qontoclient.utils.date_parser import parse_datetime


def resolve_cli_date_range(
    ctx,
    *,
    from_date: str | None,
    to_date: str | None,
    label: str,
) -> DateRange | None:
    """Resolve a --<label>-from/--<label>-to pair into a DateRange.

    Returns None when neither bound is given.
    """
    if from_date is None and to_date is None:
        return None

    start = None
    end = None
    if from_date:
        try:
            start = parse_datetime(from_date)
        except ValueError as e:
            click.echo(f"Error: Invalid --{label}-from date: {e}", err=True)
            ctx.exit(1)

    if to_date:
        try:
            end = parse_datetime(to_date)
        except ValueError as e:
            click.echo(f"Error: Invalid --{label}-to date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo(f"Error: --{label}-from must not be after --{label}-to.", err=True)
        ctx.exit(1)

    return DateRange(from_date=start, to_date=end)
