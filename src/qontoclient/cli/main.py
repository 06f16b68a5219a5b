"""Main CLI entry point."""

import logging

import click

from qontoclient.config import HttpConfiguration, HttpLoggingLevel, HttpProxy
from qontoclient.api.factories import LOGIN_ENV_VAR, SECRET_KEY_ENV_VAR

# Import and register all commands at module level
from qontoclient.cli.commands import (
    attachments,
    labels,
    memberships,
    oauth,
    organization,
    transactions,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _parse_proxy(ctx, param, value: str | None) -> HttpProxy | None:
    if value is None:
        return None
    host, _, port = value.rpartition(":")
    if not host or not port.isdigit():
        raise click.BadParameter("expected HOST:PORT", ctx=ctx, param=param)
    return HttpProxy(host=host, port=int(port))


@click.group()
@click.option("--login", envvar=LOGIN_ENV_VAR, help="API login (overrides QONTO_LOGIN)")
@click.option(
    "--secret-key", envvar=SECRET_KEY_ENV_VAR, help="API secret key (overrides QONTO_SECRET_KEY)"
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level",
)
@click.option(
    "--http-log",
    type=click.Choice([level.name.lower() for level in HttpLoggingLevel], case_sensitive=False),
    default="none",
    show_default=True,
    help="How much HTTP traffic to log (needs --log-level INFO or DEBUG)",
)
@click.option("--proxy", callback=_parse_proxy, help="HTTP proxy as HOST:PORT")
@click.option("--insecure", is_flag=True, help="Skip SSL certificate checks")
@click.pass_context
def cli(
    ctx,
    login: str | None,
    secret_key: str | None,
    log_level: str,
    http_log: str,
    proxy: HttpProxy | None,
    insecure: bool,
):
    """Qontoclient - Command line access to the Qonto API.

    Read the organization, transactions, memberships and labels of a Qonto
    account, and manage transaction attachments.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    ctx.obj["login"] = login
    ctx.obj["secret_key"] = secret_key
    ctx.obj["http_configuration"] = HttpConfiguration(
        logging_level=HttpLoggingLevel[http_log.upper()],
        http_proxy=proxy,
        bypass_ssl_checks=insecure,
    )


# Register all commands
organization.register_commands(cli)
transactions.register_commands(cli)
memberships.register_commands(cli)
labels.register_commands(cli)
attachments.register_commands(cli)
oauth.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
