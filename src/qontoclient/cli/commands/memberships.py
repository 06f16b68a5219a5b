"""Membership commands."""

import click

from qontoclient.cli.context import get_client
from qontoclient.cli.error_handling import CLI_ERRORS, handle_client_error
from qontoclient.domain.entities import DEFAULT_ITEMS_PER_PAGE, FIRST_PAGE_INDEX, Pagination


@click.command("memberships")
@click.option("--page", type=int, default=FIRST_PAGE_INDEX, show_default=True, help="Page to fetch")
@click.option("--per-page", type=int, default=DEFAULT_ITEMS_PER_PAGE, show_default=True, help="Items per page")
@click.option("--all", "fetch_all", is_flag=True, help="Fetch every page, starting at --page")
@click.pass_context
def list_memberships(ctx, page: int, per_page: int, fetch_all: bool):
    """List the memberships of the organization.

    Examples:
        qontoclient memberships
        qontoclient memberships --all
    """
    client = get_client(ctx)
    pagination = Pagination(page_index=page, items_per_page=per_page)
    try:
        if fetch_all:
            memberships = client.memberships.get_all_membership_list(pagination)
            footer = f"{len(memberships)} memberships"
        else:
            result = client.memberships.get_membership_list(pagination)
            memberships = result.items
            footer = f"Page {result.page_index}/{result.total_pages} ({result.total_items} memberships)"
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    if not memberships:
        click.echo("No memberships found.")
        return

    for membership in memberships:
        click.echo(f"{membership.id:40s} | {membership.first_name} {membership.last_name}")
    click.echo(footer)


def register_commands(cli):
    """Register membership commands with main CLI."""
    cli.add_command(list_memberships, name="memberships")
