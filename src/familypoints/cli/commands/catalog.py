"""Catalog management commands for score items, rewards and users."""

import click

from familypoints.cli.error_handling import handle_domain_error
from familypoints.cli.persistence import load, save
from familypoints.domain.catalog import CatalogService
from familypoints.domain.entities import ScoreType
from familypoints.domain.errors import DomainError
from familypoints.utils.resolver import resolve_reward_item, resolve_score_item, resolve_user


@click.group()
def items_group():
    """Manage score items."""
    pass


@items_group.command("list")
@click.pass_context
def list_items(ctx):
    """List score items."""
    state = load(ctx)
    if not state.score_items:
        click.echo("No score items found.")
        return

    for score_type in ScoreType:
        items = [i for i in state.score_items if i.type == score_type]
        if not items:
            continue
        click.echo(f"\n{score_type.value.title()}:")
        for item in items:
            click.echo(f"  {item.icon or ' '} {item.label:30s} {item.signed_points:+4d}  (ID: {item.id})")


@items_group.command("add")
@click.argument("label")
@click.argument("points", type=click.IntRange(min=0))
@click.option("--negative", is_flag=True, help="Deduct points instead of awarding them")
@click.option("--icon", help="Icon glyph")
@click.pass_context
def add_item(ctx, label: str, points: int, negative: bool, icon: str | None):
    """Add a score item worth POINTS.

    Examples:
        familypoints items add "Made the bed" 5
        familypoints items add "Shouting" 10 --negative
    """
    score_type = ScoreType.NEGATIVE if negative else ScoreType.POSITIVE
    try:
        state, item = CatalogService().add_score_item(load(ctx), label, points, score_type, icon)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Created score item '{item.label}' ({item.signed_points:+d}, ID: {item.id})")


@items_group.command("edit")
@click.argument("item")
@click.option("--label", help="New label")
@click.option("--points", type=click.IntRange(min=0), help="New point value")
@click.option("--icon", help="New icon glyph")
@click.pass_context
def edit_item(ctx, item: str, label: str | None, points: int | None, icon: str | None):
    """Edit a score item (ITEM is a label or ID)."""
    state = load(ctx)
    try:
        item_id = resolve_score_item(state, item).id
        state = CatalogService().update_score_item(state, item_id, label=label, points=points, icon=icon)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Updated score item {item_id}")


@items_group.command("remove")
@click.argument("item")
@click.pass_context
def remove_item(ctx, item: str):
    """Remove a score item. Its history entries are kept."""
    state = load(ctx)
    try:
        score_item = resolve_score_item(state, item)
        state = CatalogService().delete_score_item(state, score_item.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Removed score item '{score_item.label}'")


@click.group()
def rewards_group():
    """Manage rewards."""
    pass


@rewards_group.command("list")
@click.pass_context
def list_rewards(ctx):
    """List rewards and their cost."""
    state = load(ctx)
    if not state.reward_items:
        click.echo("No rewards found.")
        return

    for reward in state.reward_items:
        click.echo(f"  {reward.icon or ' '} {reward.label:30s} {reward.points:4d}  (ID: {reward.id})")


@rewards_group.command("add")
@click.argument("label")
@click.argument("cost", type=click.IntRange(min=0))
@click.option("--icon", help="Icon glyph")
@click.pass_context
def add_reward(ctx, label: str, cost: int, icon: str | None):
    """Add a reward costing COST points."""
    try:
        state, reward = CatalogService().add_reward_item(load(ctx), label, cost, icon)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Created reward '{reward.label}' ({reward.points} points, ID: {reward.id})")


@rewards_group.command("edit")
@click.argument("reward")
@click.option("--label", help="New label")
@click.option("--cost", type=click.IntRange(min=0), help="New cost")
@click.option("--icon", help="New icon glyph")
@click.pass_context
def edit_reward(ctx, reward: str, label: str | None, cost: int | None, icon: str | None):
    """Edit a reward (REWARD is a label or ID)."""
    state = load(ctx)
    try:
        reward_id = resolve_reward_item(state, reward).id
        state = CatalogService().update_reward_item(state, reward_id, label=label, points=cost, icon=icon)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Updated reward {reward_id}")


@rewards_group.command("remove")
@click.argument("reward")
@click.pass_context
def remove_reward(ctx, reward: str):
    """Remove a reward."""
    state = load(ctx)
    try:
        reward_item = resolve_reward_item(state, reward)
        state = CatalogService().delete_reward_item(state, reward_item.id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Removed reward '{reward_item.label}'")


@click.group()
def users_group():
    """Manage household members."""
    pass


@users_group.command("list")
@click.pass_context
def list_users(ctx):
    """List users."""
    state = load(ctx)
    for user in state.users:
        click.echo(f"  {user.avatar} {user.name:20s} {user.role.value:7s} (ID: {user.id})")


@users_group.command("rename")
@click.argument("user")
@click.argument("new_name")
@click.option("--avatar", help="New avatar glyph")
@click.pass_context
def rename_user(ctx, user: str, new_name: str, avatar: str | None):
    """Rename a user (USER is a name or ID).

    Existing history keeps the old name.
    """
    state = load(ctx)
    try:
        user_id = resolve_user(state, user).id
        state = CatalogService().update_user(state, user_id, name=new_name, avatar=avatar)
    except DomainError as e:
        handle_domain_error(ctx, e)

    save(ctx, state)
    click.echo(f"Renamed user {user_id} to '{new_name.strip()}'")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(items_group, name="items")
    cli.add_command(rewards_group, name="rewards")
    cli.add_command(users_group, name="users")
