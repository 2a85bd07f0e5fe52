"""Main CLI entry point."""

import logging

import click

from familypoints.cli.error_handling import handle_domain_error
from familypoints.database.factories import create_fallback_store, create_sqlite_database
from familypoints.domain.errors import DomainError
from familypoints.domain.state import StateService

# Import and register all commands at module level
from familypoints.cli.commands import (
    backup,
    catalog,
    ledger,
    mail,
    storage,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FAMILYPOINTS_DB_PATH environment variable)",
    envvar="FAMILYPOINTS_DB_PATH",
)
@click.option(
    "--fallback-path",
    type=click.Path(),
    help="Path to fallback store file (overrides FAMILYPOINTS_FALLBACK_PATH environment variable)",
    envvar="FAMILYPOINTS_FALLBACK_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Show log messages")
@click.pass_context
def cli(ctx, db_path: str | None, fallback_path: str | None, verbose: bool):
    """Family Points - household points tracker.

    Log good and bad behavior for the kids, keep a running score for each
    child and let them spend points on rewards.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            db = create_sqlite_database(database_path=db_path)
        except DomainError as e:
            handle_domain_error(ctx, e)
        db.connect()
        ctx.obj["db"] = db
        ctx.obj["state"] = StateService(db, fallback=create_fallback_store(fallback_path))
        ctx.call_on_close(db.disconnect)


# Register all commands
ledger.register_commands(cli)
catalog.register_commands(cli)
mail.register_commands(cli)
storage.register_commands(cli)
backup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
