"""Transaction commands."""

import click

from qontoclient.cli.commands.organization import format_cents
from qontoclient.cli.context import get_client
from qontoclient.cli.date_filters import resolve_cli_date_range
from qontoclient.cli.error_handling import CLI_ERRORS, handle_client_error
from qontoclient.domain.entities import (
    DEFAULT_ITEMS_PER_PAGE,
    FIRST_PAGE_INDEX,
    Pagination,
    SortField,
    SortOrder,
    Transaction,
    TransactionSide,
    TransactionStatus,
)

SORT_FIELDS = {"settled": SortField.SETTLED_DATE, "updated": SortField.UPDATED_DATE}
SORT_ORDERS = {"desc": SortOrder.DESCENDING, "asc": SortOrder.ASCENDING}


def _signed_cents(transaction: Transaction) -> int:
    if transaction.side == TransactionSide.DEBIT:
        return -transaction.amount_cents
    return transaction.amount_cents


def _display_transactions(transactions: list[Transaction]) -> None:
    click.echo("-" * 110)
    for txn in transactions:
        settled = txn.settled_date.strftime("%Y-%m-%d") if txn.settled_date else "pending   "
        click.echo(
            f"{settled} | {txn.internal_id:36s} | {txn.counterparty[:30]:30s} | "
            f"{format_cents(_signed_cents(txn), txn.currency):>16s} | {txn.status.name.lower()}"
        )


@click.command("transactions")
@click.argument("bank_account_slug", metavar="SLUG")
@click.option(
    "--status",
    "statuses",
    multiple=True,
    type=click.Choice([status.name.lower() for status in TransactionStatus], case_sensitive=False),
    help="Only list transactions with this status (repeatable)",
)
@click.option("--updated-from", help="Updated on or after (YYYY-MM-DD or relative like 'last month')")
@click.option("--updated-to", help="Updated on or before")
@click.option("--settled-from", help="Settled on or after (YYYY-MM-DD or relative like 'this year')")
@click.option("--settled-to", help="Settled on or before")
@click.option(
    "--sort-field", type=click.Choice(list(SORT_FIELDS)), default="settled", show_default=True
)
@click.option(
    "--sort-order", type=click.Choice(list(SORT_ORDERS)), default="desc", show_default=True
)
@click.option("--page", type=int, default=FIRST_PAGE_INDEX, show_default=True, help="Page to fetch")
@click.option("--per-page", type=int, default=DEFAULT_ITEMS_PER_PAGE, show_default=True, help="Items per page")
@click.option("--all", "fetch_all", is_flag=True, help="Fetch every page, starting at --page")
@click.pass_context
def list_transactions(
    ctx,
    bank_account_slug: str,
    statuses: tuple[str, ...],
    updated_from: str | None,
    updated_to: str | None,
    settled_from: str | None,
    settled_to: str | None,
    sort_field: str,
    sort_order: str,
    page: int,
    per_page: int,
    fetch_all: bool,
) -> None:
    """List the transactions of a bank account.

    SLUG is the bank account slug shown by the organization command.

    Examples:
        qontoclient transactions acme-corp-1111
        qontoclient transactions acme-corp-1111 --status completed --settled-from "this month"
        qontoclient transactions acme-corp-1111 --sort-field updated --sort-order asc --all
    """
    updated_range = resolve_cli_date_range(
        ctx, from_date=updated_from, to_date=updated_to, label="updated"
    )
    settled_range = resolve_cli_date_range(
        ctx, from_date=settled_from, to_date=settled_to, label="settled"
    )
    client = get_client(ctx)
    filters = dict(
        status=frozenset(TransactionStatus[status.upper()] for status in statuses),
        updated_date_range=updated_range,
        settled_date_range=settled_range,
        sort_field=SORT_FIELDS[sort_field],
        sort_order=SORT_ORDERS[sort_order],
        pagination=Pagination(page_index=page, items_per_page=per_page),
    )

    try:
        if fetch_all:
            transactions = client.transactions.get_all_transaction_list(bank_account_slug, **filters)
            footer = f"{len(transactions)} transactions"
        else:
            result = client.transactions.get_transaction_list(bank_account_slug, **filters)
            transactions = result.items
            footer = f"Page {result.page_index}/{result.total_pages} ({result.total_items} transactions)"
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    _display_transactions(transactions)
    click.echo(footer)


@click.command("transaction")
@click.argument("internal_id", metavar="INTERNAL_ID")
@click.pass_context
def show_transaction(ctx, internal_id: str) -> None:
    """Show one transaction.

    INTERNAL_ID is the transaction's internal id (a UUID), not its display id.

    Examples:
        qontoclient transaction 7b7a5ed6-3903-4782-889d-b4f64bd7bef9
    """
    client = get_client(ctx)
    try:
        txn = client.transactions.get_transaction(internal_id)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    click.echo(f"\nTransaction: {txn.id}")
    click.echo("-" * 60)
    click.echo(f"Internal ID:   {txn.internal_id}")
    click.echo(f"Counterparty:  {txn.counterparty}")
    click.echo(f"Amount:        {format_cents(_signed_cents(txn), txn.currency)}")
    if txn.local_currency != txn.currency:
        click.echo(f"Local amount:  {format_cents(txn.local_amount_cents, txn.local_currency)}")
    click.echo(f"Operation:     {txn.operation_type.name.lower()}")
    click.echo(f"Category:      {txn.category.name.lower()}")
    click.echo(f"Status:        {txn.status.name.lower()}")
    click.echo(f"Emitted:       {txn.emitted_date.isoformat()}")
    if txn.settled_date is not None:
        click.echo(f"Settled:       {txn.settled_date.isoformat()}")
    if txn.card_last_digits:
        click.echo(f"Card:          **** {txn.card_last_digits}")
    if txn.reference:
        click.echo(f"Reference:     {txn.reference}")
    if txn.note:
        click.echo(f"Note:          {txn.note}")
    if txn.labels:
        click.echo(f"Labels:        {', '.join(label.name for label in txn.labels)}")
    click.echo(f"Attachments:   {len(txn.attachment_ids)}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions, name="transactions")
    cli.add_command(show_transaction, name="transaction")
