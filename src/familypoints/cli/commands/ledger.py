"""Scoring commands: status, log, redeem and history."""

from datetime import datetime

import click

from familypoints.cli.error_handling import handle_domain_error
from familypoints.cli.persistence import get_state_service, load, save
from familypoints.domain.catalog import children
from familypoints.domain.entities import AppState, User, UserRole
from familypoints.domain.errors import DomainError, NotFoundError
from familypoints.domain.ledger import LedgerService, is_redemption, records_for_child
from familypoints.domain.mailbox import unread_count
from familypoints.utils.resolver import resolve_reward_item, resolve_score_item, resolve_user


def resolve_creator(state: AppState, ref: str | None) -> User:
    """Resolve --by, defaulting to the first parent."""
    if ref is not None:
        return resolve_user(state, ref)
    for user in state.users:
        if user.role == UserRole.PARENT:
            return user
    raise NotFoundError("No parent user found; pass --by")


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")


@click.command("status")
@click.pass_context
def status(ctx):
    """Show every child's current score."""
    state = load(ctx)
    service = get_state_service(ctx)

    kids = children(state)
    if not kids:
        click.echo("No children found.")
        return

    click.echo("\nScores:")
    click.echo("-" * 40)
    for child in kids:
        score = service.calculate_score(child.id, state.records)
        click.echo(f"{child.avatar} {child.name:20s} {score:6d}")

    unread = unread_count(state)
    if unread:
        click.echo(f"\n{unread} unread message{'s' if unread != 1 else ''}. See 'familypoints mail list'.")


@click.command("log")
@click.argument("child")
@click.argument("item")
@click.option("--note", help="Optional note")
@click.option("--by", "created_by", help="Parent logging the event (defaults to the first parent)")
@click.pass_context
def log_behavior(ctx, child: str, item: str, note: str | None, created_by: str | None):
    """Log a behavior for a child.

    CHILD and ITEM can be names or IDs.

    Examples:
        familypoints log Ethan Chores
        familypoints log child_2 "Picky eating" --note "No broccoli"
    """
    state = load(ctx)
    try:
        kid = resolve_user(state, child)
        score_item = resolve_score_item(state, item)
        creator = resolve_creator(state, created_by)
        state, record = LedgerService().log_behavior(
            state, kid.id, score_item.id, creator.id, note=note
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    score = get_state_service(ctx).calculate_score(kid.id, state.records)
    click.echo(f"{record.points_change:+d} {kid.name}: {record.item_name} (score: {score})")


@click.command("redeem")
@click.argument("child")
@click.argument("reward")
@click.option("--by", "created_by", help="Parent approving the redemption (defaults to the first parent)")
@click.pass_context
def redeem_reward(ctx, child: str, reward: str, created_by: str | None):
    """Spend a child's points on a reward.

    Fails if the child doesn't have enough points.
    """
    state = load(ctx)
    try:
        kid = resolve_user(state, child)
        reward_item = resolve_reward_item(state, reward)
        creator = resolve_creator(state, created_by)
        state, record = LedgerService().redeem_reward(state, kid.id, reward_item.id, creator.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    score = get_state_service(ctx).calculate_score(kid.id, state.records)
    click.echo(f"{kid.name} redeemed {reward_item.label} for {reward_item.points} points (score: {score})")


@click.command("history")
@click.option("--child", help="Only show this child (name or ID)")
@click.option("--days", type=click.IntRange(min=1), help="Only show the last N days")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True)
@click.pass_context
def history(ctx, child: str | None, days: int | None, limit: int):
    """Show ledger entries, newest first."""
    state = load(ctx)
    if child is None:
        records = records_for_child(state.records, days=days)
    else:
        try:
            child_id = resolve_user(state, child).id
            records = get_state_service(ctx).records_for_child(child_id, days)
        except DomainError as e:
            handle_domain_error(ctx, e)

    if not records:
        click.echo("No records found.")
        return

    for record in records[:limit]:
        marker = "R" if is_redemption(record) else " "
        note = f"  ({record.note})" if record.note else ""
        click.echo(
            f"{format_timestamp(record.timestamp)} {marker} {record.points_change:+5d}  "
            f"{record.child_name:12s} {record.item_name}{note}  - {record.created_by_name}"
        )


def register_commands(cli):
    """Register scoring commands with main CLI."""
    cli.add_command(status)
    cli.add_command(log_behavior)
    cli.add_command(redeem_reward)
    cli.add_command(history)
