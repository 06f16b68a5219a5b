"""OAuth commands."""

import secrets

import click

from qontoclient.cli.context import get_client
from qontoclient.cli.error_handling import CLI_ERRORS, handle_client_error
from qontoclient.config import OAuthAuthentication
from qontoclient.domain.entities import OAuthCredentials


def _credentials(ctx) -> OAuthCredentials:
    return ctx.obj["oauth_credentials"]


@click.group()
@click.option("--client-id", envvar="QONTO_CLIENT_ID", required=True, help="OAuth client id")
@click.option("--client-secret", envvar="QONTO_CLIENT_SECRET", default="", help="OAuth client secret")
@click.option("--redirect-uri", envvar="QONTO_REDIRECT_URI", required=True, help="OAuth redirect URI")
@click.pass_context
def oauth_group(ctx, client_id: str, client_secret: str, redirect_uri: str):
    """OAuth helpers for third party applications."""
    ctx.obj["oauth_credentials"] = OAuthCredentials(
        client_id=client_id, client_secret=client_secret, redirect_uri=redirect_uri
    )


@oauth_group.command("login-uri")
@click.option("--state", help="Unique state (a random one is generated if omitted)")
@click.pass_context
def login_uri(ctx, state: str | None) -> None:
    """Print the URI to open in a browser to authorize the application.

    Examples:
        qontoclient oauth --client-id abc --redirect-uri https://example.com/cb login-uri
    """
    client = get_client(ctx, authentication=OAuthAuthentication())
    unique_state = state or secrets.token_urlsafe(16)
    try:
        uri = client.oauth.get_login_uri(_credentials(ctx), unique_state)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)
    click.echo(uri)


@oauth_group.command("extract")
@click.argument("redirect_uri", metavar="REDIRECT_URI")
@click.pass_context
def extract(ctx, redirect_uri: str) -> None:
    """Print the code and unique state found in a redirect URI."""
    client = get_client(ctx, authentication=OAuthAuthentication())
    try:
        result = client.oauth.extract_code_and_unique_state_from_redirect_uri(redirect_uri)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    if result is None:
        click.echo("Error: No code and state found in the redirect URI.", err=True)
        ctx.exit(1)
    click.echo(f"Code:  {result.code}")
    click.echo(f"State: {result.unique_state}")


@oauth_group.command("tokens")
@click.argument("code", metavar="CODE")
@click.pass_context
def tokens(ctx, code: str) -> None:
    """Exchange an authorization code for access and refresh tokens."""
    client = get_client(ctx, authentication=OAuthAuthentication())
    try:
        oauth_tokens = client.oauth.get_tokens(_credentials(ctx), code)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    click.echo(f"Access token:  {oauth_tokens.access_token}")
    click.echo(f"Refresh token: {oauth_tokens.refresh_token}")
    click.echo(f"Expires at:    {oauth_tokens.expires_at.isoformat()}")


def register_commands(cli: click.Group) -> None:
    """Register OAuth commands with main CLI."""
    cli.add_command(oauth_group, name="oauth")
