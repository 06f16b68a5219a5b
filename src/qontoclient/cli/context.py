"""Lazy client creation for CLI commands."""

import click

from qontoclient.api.factories import create_client
from qontoclient.config import Authentication, ClientConfiguration, LoginSecretKeyAuthentication
from qontoclient.facades.blocking import BlockingQontoClient


def get_client(ctx: click.Context, authentication: Authentication | None = None) -> BlockingQontoClient:
    """Return the blocking client for this invocation, creating it on first use.

    Without an explicit authentication, the --login/--secret-key options (or
    their environment variables) are required. The client is closed when the
    root context is torn down.
    """
    root = ctx.find_root()
    obj = root.obj
    if "client" in obj:
        return obj["client"]

    if authentication is None:
        login = obj.get("login")
        secret_key = obj.get("secret_key")
        if not login or not secret_key:
            click.echo(
                "Error: --login and --secret-key (or QONTO_LOGIN and QONTO_SECRET_KEY) are required.",
                err=True,
            )
            ctx.exit(1)
        authentication = LoginSecretKeyAuthentication(login=login, secret_key=secret_key)

    configuration = ClientConfiguration(
        authentication=authentication,
        http_configuration=obj["http_configuration"],
    )
    client = BlockingQontoClient(create_client(configuration, transport=obj.get("transport")))
    obj["client"] = client
    root.call_on_close(client.close)
    return client
