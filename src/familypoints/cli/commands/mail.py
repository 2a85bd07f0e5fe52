"""Secret mailbox commands."""

import click

from familypoints.cli.commands.ledger import format_timestamp
from familypoints.cli.error_handling import handle_domain_error
from familypoints.cli.persistence import get_state_service, load, save
from familypoints.domain.errors import DomainError
from familypoints.domain.mailbox import MailboxService, inbox
from familypoints.utils.resolver import resolve_user


@click.group()
def mail_group():
    """Send and read secret messages."""
    pass


@mail_group.command("send")
@click.argument("child")
@click.argument("content")
@click.pass_context
def send_message(ctx, child: str, content: str):
    """Leave a message from CHILD (name or ID)."""
    state = load(ctx)
    try:
        sender = resolve_user(state, child)
        state, message = MailboxService().send_message(state, sender.id, content)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Message from {message.from_child_name} delivered (ID: {message.id})")


@mail_group.command("list")
@click.pass_context
def list_messages(ctx):
    """List messages, unread first."""
    state = load(ctx)
    messages = inbox(state)
    if not messages:
        click.echo("No messages.")
        return

    try:
        unread = get_state_service(ctx).unread_message_count()
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\n{unread} unread")
    for message in messages:
        flag = "*" if not message.is_read else " "
        click.echo(
            f"{flag} {format_timestamp(message.timestamp)} {message.from_child_name:12s} "
            f"{message.content}  (ID: {message.id})"
        )


@mail_group.command("read")
@click.argument("message_id")
@click.pass_context
def read_message(ctx, message_id: str):
    """Mark a message as read."""
    try:
        state = MailboxService().mark_read(load(ctx), message_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Marked message {message_id} as read")


def register_commands(cli):
    """Register mailbox commands with main CLI."""
    cli.add_command(mail_group, name="mail")
