"""CLI helpers for loading and saving the snapshot."""

import click

from familypoints.domain.entities import AppState, SaveResult
from familypoints.domain.state import StateService


def get_state_service(ctx: click.Context) -> StateService:
    """Return the StateService built by the CLI entry point."""
    return ctx.obj["state"]


def load(ctx: click.Context) -> AppState:
    """Load the current snapshot."""
    return get_state_service(ctx).load_state()


def save(ctx: click.Context, state: AppState) -> SaveResult:
    """Save a snapshot and print any advisory.

    A failed save is reported but does not abort the command; the change is
    simply not persisted.
    """
    result = get_state_service(ctx).save_state(state)
    if not result.success:
        click.echo(f"Warning: changes were not saved: {result.error}", err=True)
    elif result.used_fallback:
        click.echo(f"Warning: {result.error}", err=True)
    if result.storage_warning:
        info = get_state_service(ctx).capacity_info()
        click.echo(
            f"Warning: storage is {info.percentage:.1f}% full "
            f"({info.used_formatted} of {info.quota_formatted}). "
            "Consider pruning old records.",
            err=True,
        )
    return result
