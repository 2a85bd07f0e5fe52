"""Mapper functions to convert between domain models and SQLAlchemy models.

Reads map ORM rows to domain entities; writes map domain entities to plain
column dicts so a whole collection can be bulk-inserted in one statement.
"""

from typing import Any

from familypoints.domain import entities as domain
from familypoints.database.models import (
    RewardItem as ORMRewardItem,
    ScoreItem as ORMScoreItem,
    ScoreRecord as ORMScoreRecord,
    SecretMessage as ORMSecretMessage,
    User as ORMUser,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        role=domain.UserRole(orm_user.role),
        avatar=orm_user.avatar,
    )


def score_item_to_domain(orm_item: ORMScoreItem) -> domain.ScoreItem:
    """Convert SQLAlchemy ScoreItem model to domain ScoreItem entity."""
    return domain.ScoreItem(
        id=orm_item.id,
        label=orm_item.label,
        points=orm_item.points,
        type=domain.ScoreType(orm_item.type),
        icon=orm_item.icon,
    )


def reward_item_to_domain(orm_reward: ORMRewardItem) -> domain.RewardItem:
    """Convert SQLAlchemy RewardItem model to domain RewardItem entity."""
    return domain.RewardItem(
        id=orm_reward.id,
        label=orm_reward.label,
        points=orm_reward.points,
        icon=orm_reward.icon,
    )


def score_record_to_domain(orm_record: ORMScoreRecord) -> domain.ScoreRecord:
    """Convert SQLAlchemy ScoreRecord model to domain ScoreRecord entity."""
    return domain.ScoreRecord(
        id=orm_record.id,
        child_id=orm_record.child_id,
        child_name=orm_record.child_name,
        item_id=orm_record.item_id,
        item_name=orm_record.item_name,
        points_change=orm_record.points_change,
        timestamp=orm_record.timestamp,
        created_by_id=orm_record.created_by_id,
        created_by_name=orm_record.created_by_name,
        note=orm_record.note,
    )


def secret_message_to_domain(orm_message: ORMSecretMessage) -> domain.SecretMessage:
    """Convert SQLAlchemy SecretMessage model to domain SecretMessage entity."""
    return domain.SecretMessage(
        id=orm_message.id,
        from_child_id=orm_message.from_child_id,
        from_child_name=orm_message.from_child_name,
        content=orm_message.content,
        timestamp=orm_message.timestamp,
        is_read=orm_message.is_read,
    )


def user_to_row(user: domain.User) -> dict[str, Any]:
    """Convert domain User entity to a users row."""
    return {"id": user.id, "name": user.name, "role": user.role.value, "avatar": user.avatar}


def score_item_to_row(item: domain.ScoreItem) -> dict[str, Any]:
    """Convert domain ScoreItem entity to a score_items row."""
    return {
        "id": item.id,
        "label": item.label,
        "points": item.points,
        "type": item.type.value,
        "icon": item.icon,
    }


def reward_item_to_row(reward: domain.RewardItem) -> dict[str, Any]:
    """Convert domain RewardItem entity to a reward_items row."""
    return {"id": reward.id, "label": reward.label, "points": reward.points, "icon": reward.icon}


def score_record_to_row(record: domain.ScoreRecord) -> dict[str, Any]:
    """Convert domain ScoreRecord entity to a records row."""
    return {
        "id": record.id,
        "child_id": record.child_id,
        "child_name": record.child_name,
        "item_id": record.item_id,
        "item_name": record.item_name,
        "points_change": record.points_change,
        "timestamp": record.timestamp,
        "note": record.note,
        "created_by_id": record.created_by_id,
        "created_by_name": record.created_by_name,
    }


def secret_message_to_row(message: domain.SecretMessage) -> dict[str, Any]:
    """Convert domain SecretMessage entity to a messages row."""
    return {
        "id": message.id,
        "from_child_id": message.from_child_id,
        "from_child_name": message.from_child_name,
        "content": message.content,
        "timestamp": message.timestamp,
        "is_read": message.is_read,
    }
