"""Backup export and import commands."""

from datetime import date

import click

from familypoints.cli.error_handling import handle_domain_error
from familypoints.cli.persistence import get_state_service
from familypoints.domain.errors import DomainError


@click.command("export")
@click.argument("output", type=click.Path(dir_okay=False, writable=True), required=False)
@click.pass_context
def export_backup(ctx, output: str | None):
    """Write a JSON backup of all data.

    OUTPUT defaults to familypoints-backup-YYYY-MM-DD.json; use - for stdout.
    """
    try:
        text = get_state_service(ctx).export_snapshot()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if output == "-":
        click.echo(text)
        return

    if output is None:
        output = f"familypoints-backup-{date.today().isoformat()}.json"

    try:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        click.echo(f"Error: Could not write {output}: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Backup written to {output}")


@click.command("import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def import_backup(ctx, backup_file: str, yes: bool):
    """Restore all data from a JSON backup, replacing everything."""
    with open(backup_file, "rb") as f:
        data = f.read()

    if not yes:
        click.confirm("Importing replaces ALL current data. Continue?", abort=True)

    try:
        get_state_service(ctx).import_snapshot(data)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Restored data from {backup_file}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(export_backup)
    cli.add_command(import_backup)
