"""Storage maintenance commands."""

import click

from familypoints.cli.error_handling import handle_domain_error
from familypoints.cli.persistence import get_state_service
from familypoints.domain.errors import DomainError
from familypoints.domain.state import STORAGE_WARNING_THRESHOLD


@click.command("storage")
@click.pass_context
def storage_info(ctx):
    """Show how much storage the database uses."""
    info = get_state_service(ctx).capacity_info()
    click.echo(f"Used:  {info.used_formatted}")
    click.echo(f"Quota: {info.quota_formatted}")
    click.echo(f"Usage: {info.percentage:.1f}%")
    if info.percentage > STORAGE_WARNING_THRESHOLD:
        click.echo("Storage is almost full. Consider running 'familypoints prune'.")


@click.command("prune")
@click.argument("days", type=click.IntRange(min=1))
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def prune(ctx, days: int, yes: bool):
    """Delete history entries older than DAYS days.

    Scores are derived from history, so pruning changes them.
    """
    if not yes:
        click.confirm(
            f"Delete all records older than {days} days? This cannot be undone.",
            abort=True,
        )

    try:
        deleted = get_state_service(ctx).prune_older_than(days)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted {deleted} record{'s' if deleted != 1 else ''}.")


@click.command("restore-fallback")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def restore_fallback(ctx, yes: bool):
    """Move a snapshot saved to fallback storage back into the database.

    Snapshots land in fallback storage when the database rejects a save.
    Restoring replaces ALL current data with that snapshot.
    """
    service = get_state_service(ctx)
    try:
        snapshot = service.read_fallback()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if snapshot is None:
        click.echo("No snapshot in fallback storage.")
        return

    click.echo(
        f"Fallback snapshot holds {len(snapshot.records)} records "
        f"and {len(snapshot.messages)} messages."
    )
    if not yes:
        click.confirm("Replace ALL current data with it?", abort=True)

    try:
        service.restore_fallback()
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("Restored data from fallback storage.")


def register_commands(cli):
    """Register storage commands with main CLI."""
    cli.add_command(storage_info)
    cli.add_command(prune)
    cli.add_command(restore_fallback)
