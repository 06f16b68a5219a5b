"""Organization command."""

import click

from qontoclient.cli.context import get_client
from qontoclient.cli.error_handling import CLI_ERRORS, handle_client_error


def format_cents(cents: int, currency: str) -> str:
    """Format an amount in cents, e.g. 123456 EUR -> '1234.56 EUR'."""
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    return f"{sign}{whole}.{fraction:02d} {currency}"


@click.command("organization")
@click.pass_context
def show_organization(ctx):
    """Show the organization and its bank accounts.

    Examples:
        qontoclient organization
    """
    client = get_client(ctx)
    try:
        organization = client.organizations.get_organization()
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    click.echo(f"\nOrganization: {organization.slug}")
    if not organization.bank_accounts:
        click.echo("No bank accounts found.")
        return

    click.echo("-" * 80)
    for account in organization.bank_accounts:
        click.echo(
            f"{account.slug:30s} | {account.iban:34s} | "
            f"{format_cents(account.balance_cents, account.currency)}"
        )


def register_commands(cli):
    """Register organization command with main CLI."""
    cli.add_command(show_organization, name="organization")
