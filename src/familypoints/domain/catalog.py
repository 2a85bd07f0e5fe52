"""Catalog domain service.

Users, score items and reward items are edited by producing a new snapshot;
the caller persists the result with `StateService.save_state`.
"""

from dataclasses import replace
from typing import Optional

from familypoints.domain.entities import (
    AppState,
    RewardItem,
    ScoreItem,
    ScoreType,
    User,
)
from familypoints.domain.errors import (
    NotFoundError,
    ValidationError,
    reward_item_not_found,
    score_item_not_found,
    user_not_found,
)
from familypoints.utils.clock import new_id


def _require_text(value: str, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} must not be empty")
    return text


def _require_points(points: int) -> int:
    if isinstance(points, bool) or not isinstance(points, int):
        raise ValidationError(f"Points must be an integer, got {points!r}")
    if points < 0:
        raise ValidationError(f"Points must not be negative, got {points}")
    return points


def children(state: AppState) -> list[User]:
    """Return all CHILD users in catalog order."""
    return [user for user in state.users if user.is_child]


def find_user(state: AppState, user_id: str) -> User:
    """Return the user with `user_id`.

    Raises:
        NotFoundError: If no such user exists
    """
    for user in state.users:
        if user.id == user_id:
            return user
    raise NotFoundError(user_not_found(user_id))


def find_score_item(state: AppState, item_id: str) -> ScoreItem:
    """Return the score item with `item_id`.

    Raises:
        NotFoundError: If no such item exists
    """
    for item in state.score_items:
        if item.id == item_id:
            return item
    raise NotFoundError(score_item_not_found(item_id))


def find_reward_item(state: AppState, reward_id: str) -> RewardItem:
    """Return the reward item with `reward_id`.

    Raises:
        NotFoundError: If no such reward exists
    """
    for reward in state.reward_items:
        if reward.id == reward_id:
            return reward
    raise NotFoundError(reward_item_not_found(reward_id))


class CatalogService:
    """Service for editing the household catalog."""

    def add_score_item(
        self,
        state: AppState,
        label: str,
        points: int,
        score_type: ScoreType,
        icon: Optional[str] = None,
    ) -> tuple[AppState, ScoreItem]:
        """Add a score item.

        Args:
            state: Current snapshot
            label: Display label
            points: Non-negative magnitude; the sign comes from `score_type`
            score_type: POSITIVE or NEGATIVE
            icon: Optional glyph

        Returns:
            Tuple of (new snapshot, created item)

        Raises:
            ValidationError: If label is empty or points is negative
        """
        item = ScoreItem(
            id=new_id(),
            label=_require_text(label, "Label"),
            points=_require_points(points),
            type=ScoreType(score_type),
            icon=icon,
        )
        return replace(state, score_items=state.score_items + (item,)), item

    def update_score_item(
        self,
        state: AppState,
        item_id: str,
        label: Optional[str] = None,
        points: Optional[int] = None,
        score_type: Optional[ScoreType] = None,
        icon: Optional[str] = None,
    ) -> AppState:
        """Update the given fields of a score item; None leaves a field unchanged."""
        item = find_score_item(state, item_id)
        changes = {}
        if label is not None:
            changes["label"] = _require_text(label, "Label")
        if points is not None:
            changes["points"] = _require_points(points)
        if score_type is not None:
            changes["type"] = ScoreType(score_type)
        if icon is not None:
            changes["icon"] = icon
        updated = replace(item, **changes)
        return replace(
            state,
            score_items=tuple(updated if i.id == item_id else i for i in state.score_items),
        )

    def delete_score_item(self, state: AppState, item_id: str) -> AppState:
        """Delete a score item. Existing ledger entries keep their copied name."""
        find_score_item(state, item_id)
        return replace(
            state, score_items=tuple(i for i in state.score_items if i.id != item_id)
        )

    def add_reward_item(
        self, state: AppState, label: str, points: int, icon: Optional[str] = None
    ) -> tuple[AppState, RewardItem]:
        """Add a reward item costing `points`.

        Returns:
            Tuple of (new snapshot, created reward)

        Raises:
            ValidationError: If label is empty or points is negative
        """
        reward = RewardItem(
            id=new_id(),
            label=_require_text(label, "Label"),
            points=_require_points(points),
            icon=icon,
        )
        return replace(state, reward_items=state.reward_items + (reward,)), reward

    def update_reward_item(
        self,
        state: AppState,
        reward_id: str,
        label: Optional[str] = None,
        points: Optional[int] = None,
        icon: Optional[str] = None,
    ) -> AppState:
        """Update the given fields of a reward item; None leaves a field unchanged."""
        reward = find_reward_item(state, reward_id)
        changes = {}
        if label is not None:
            changes["label"] = _require_text(label, "Label")
        if points is not None:
            changes["points"] = _require_points(points)
        if icon is not None:
            changes["icon"] = icon
        updated = replace(reward, **changes)
        return replace(
            state,
            reward_items=tuple(updated if r.id == reward_id else r for r in state.reward_items),
        )

    def delete_reward_item(self, state: AppState, reward_id: str) -> AppState:
        """Delete a reward item."""
        find_reward_item(state, reward_id)
        return replace(
            state, reward_items=tuple(r for r in state.reward_items if r.id != reward_id)
        )

    def update_user(
        self,
        state: AppState,
        user_id: str,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> AppState:
        """Rename a user or change their avatar. Users are never deleted."""
        user = find_user(state, user_id)
        changes = {}
        if name is not None:
            changes["name"] = _require_text(name, "Name")
        if avatar is not None:
            changes["avatar"] = _require_text(avatar, "Avatar")
        updated = replace(user, **changes)
        return replace(
            state, users=tuple(updated if u.id == user_id else u for u in state.users)
        )
