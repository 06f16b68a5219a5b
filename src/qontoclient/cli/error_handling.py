"""CLI error handling helpers."""

import click
import httpx

from qontoclient.domain.errors import QontoError

# Errors a command renders instead of letting them escape as a traceback
CLI_ERRORS = (QontoError, httpx.HTTPError, ValueError, OSError)


def handle_client_error(ctx: click.Context, error: Exception) -> None:
    """Render a client error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
