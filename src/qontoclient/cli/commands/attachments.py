"""Attachment commands."""

import click

from qontoclient.cli.context import get_client
from qontoclient.cli.error_handling import CLI_ERRORS, handle_client_error
from qontoclient.domain.attachments import AttachmentType
from qontoclient.domain.entities import Attachment


def _display_attachment(attachment: Attachment) -> None:
    click.echo(
        f"{attachment.id:36s} | {attachment.file_name:30s} | "
        f"{attachment.size:>9d} B | {attachment.content_type}"
    )


@click.command("attachment")
@click.argument("attachment_id", metavar="ATTACHMENT_ID")
@click.pass_context
def show_attachment(ctx, attachment_id: str) -> None:
    """Show one attachment and its download URL.

    Examples:
        qontoclient attachment 3e4b7b4c-0d6f-4c2b-9a53-4d6b2f3b1c7a
    """
    client = get_client(ctx)
    try:
        attachment = client.attachments.get_attachment(attachment_id)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    _display_attachment(attachment)
    click.echo(f"Created: {attachment.created_date.isoformat()}")
    click.echo(f"URL:     {attachment.url}")
    if attachment.probative_attachment is not None:
        click.echo(f"Probative: {attachment.probative_attachment.status.name.lower()}")


@click.command("attachments")
@click.argument("internal_id", metavar="INTERNAL_ID")
@click.pass_context
def list_attachments(ctx, internal_id: str) -> None:
    """List the attachments of a transaction.

    INTERNAL_ID is the transaction's internal id (a UUID).
    """
    client = get_client(ctx)
    try:
        attachments = client.attachments.get_attachment_list(internal_id)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    if not attachments:
        click.echo("No attachments found.")
        return

    for attachment in attachments:
        _display_attachment(attachment)


@click.command("attach")
@click.argument("internal_id", metavar="INTERNAL_ID")
@click.argument("file_path", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--type",
    "type_name",
    type=click.Choice([t.name.lower() for t in AttachmentType], case_sensitive=False),
    help="File type (guessed from the file extension if omitted)",
)
@click.pass_context
def attach_file(ctx, internal_id: str, file_path: str, type_name: str | None) -> None:
    """Upload a PNG, JPEG or PDF file as an attachment of a transaction.

    Examples:
        qontoclient attach 7b7a5ed6-3903-4782-889d-b4f64bd7bef9 receipt.pdf
        qontoclient attach 7b7a5ed6-3903-4782-889d-b4f64bd7bef9 scan --type png
    """
    try:
        if type_name is not None:
            attachment_type = AttachmentType[type_name.upper()]
        else:
            attachment_type = AttachmentType.from_file_name(file_path)
    except ValueError as e:
        handle_client_error(ctx, e)

    client = get_client(ctx)
    try:
        with open(file_path, "rb") as byte_input:
            client.attachments.add_attachment(internal_id, attachment_type, byte_input)
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)

    click.echo(f"Attached '{file_path}' to transaction {internal_id}")


@click.command("detach")
@click.argument("internal_id", metavar="INTERNAL_ID")
@click.argument("attachment_id", metavar="[ATTACHMENT_ID]", required=False)
@click.pass_context
def detach(ctx, internal_id: str, attachment_id: str | None) -> None:
    """Remove one attachment from a transaction, or all of them.

    Without ATTACHMENT_ID every attachment of the transaction is removed.

    Examples:
        qontoclient detach 7b7a5ed6-3903-4782-889d-b4f64bd7bef9 3e4b7b4c-0d6f-4c2b-9a53-4d6b2f3b1c7a
        qontoclient detach 7b7a5ed6-3903-4782-889d-b4f64bd7bef9
    """
    client = get_client(ctx)
    try:
        if attachment_id is None:
            client.attachments.remove_all_attachments(internal_id)
            click.echo(f"Removed all attachments from transaction {internal_id}")
        else:
            client.attachments.remove_attachment(internal_id, attachment_id)
            click.echo(f"Removed attachment {attachment_id} from transaction {internal_id}")
    except CLI_ERRORS as e:
        handle_client_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register attachment commands with main CLI."""
    cli.add_command(show_attachment, name="attachment")
    cli.add_command(list_attachments, name="attachments")
    cli.add_command(attach_file, name="attach")
    cli.add_command(detach, name="detach")
