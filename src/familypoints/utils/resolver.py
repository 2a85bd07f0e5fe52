"""Utility for resolving catalog names to entities."""

from typing import Callable, Iterable, TypeVar

from familypoints.domain.entities import AppState, RewardItem, ScoreItem, User
from familypoints.domain.errors import NotFoundError

T = TypeVar("T")


def _resolve(entries: Iterable[T], ref: str, label: Callable[[T], str], kind: str) -> T:
    entries = list(entries)
    # An exact ID always wins over a name
    for entry in entries:
        if entry.id == ref:
            return entry

    wanted = ref.strip().casefold()
    matches = [entry for entry in entries if label(entry).casefold() == wanted]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise NotFoundError(f"{kind} '{ref}' is ambiguous; use its ID")
    raise NotFoundError(f"{kind} '{ref}' not found")


def resolve_user(state: AppState, ref: str) -> User:
    """Resolve a user ID or name (case-insensitive) to a User.

    Raises:
        NotFoundError: If nothing or more than one user matches
    """
    return _resolve(state.users, ref, lambda u: u.name, "User")


def resolve_score_item(state: AppState, ref: str) -> ScoreItem:
    """Resolve a score item ID or label to a ScoreItem."""
    return _resolve(state.score_items, ref, lambda i: i.label, "Score item")


def resolve_reward_item(state: AppState, ref: str) -> RewardItem:
    """Resolve a reward item ID or label to a RewardItem."""
    return _resolve(state.reward_items, ref, lambda r: r.label, "Reward item")
