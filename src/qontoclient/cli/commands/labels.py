"""Label commands."""

import click

from qontoclient.cli.context import get_client
from qontoclient.cli.error_handling import CLI_ERRORS, handle_client_error
from qontoclient.domain.entities import DEFAULT_ITEMS_PER_PAGE, FIRST_PAGE_INDEX, Label, Pagination


def _display_label_tree(labels: list[Label]) -> None:
    """Display labels with children indented under their parent."""
    children: dict[str | None, list[Label]] = {}
    known_ids = {label.id for label in labels}
    for label in labels:
        # Labels whose parent is on another page are shown as roots
        parent_id = label.parent_id if label.parent_id in known_ids - {label.id} else None
        children.setdefault(parent_id, []).append(label)

    def display(parent_id: str | None, indent: int) -> None:
        for label in children.get(parent_id, []):
            click.echo(f"{'    ' * indent}{label.name} ({label.id})")
            display(label.id, indent + 1)

    display(None, 0)


@click.command("labels")
@click.option("--page", type=int, default=FIRST_PAGE_INDEX, show_default=True, help="Page to fetch")
@click.option("--per-page", type=int, default=DEFAULT_ITEMS_PER_PAGE, show_default=True, help="Items per page")
@click.option("--all", "fetch_all", is_flag=True, help="Fetch every page, starting at --page")
@click.pass_context
def list_labels(ctx, page: int, per_page: int, fetch_all: bool):
    """List the labels of the organization as a tree.

    Examples:
        qontoclient labels
        qontoclient labels --all
    """
    client = get_client(ctx)
    pagination = Pagination(page_index=page, items_per_page=per_page)
    try:
        if fetch_all:
            labels = client.labels.get_all_label_list(pagination)
        else:
            labels = client.labels.get_label_list(pagination).items
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    if not labels:
        click.echo("No labels found.")
        return

    _display_label_tree(labels)


def register_commands(cli):
    """Register label commands with main CLI."""
    cli.add_command(list_labels, name="labels")
