"""JSON interchange format for backups and the fallback store.

A backup is one JSON object holding the five collections under `users`,
`scoreItems`, `rewardItems`, `records` and `messages`, plus `exportedAt` and
`version` metadata. Entity fields use camelCase keys and optional fields
that are unset are omitted.
"""

import json
from datetime import datetime, UTC
from typing import Any, Callable, Optional, Union

from familypoints.domain import entities as domain
from familypoints.domain.errors import InvalidBackupError, invalid_backup

BACKUP_VERSION = "2.0"

# Collections a backup must name explicitly; the rest default to empty.
REQUIRED_KEYS = ("users", "records")


def _text(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {value!r}")
    return value


def _integer(data: dict[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")
    return value


def _points(data: dict[str, Any]) -> int:
    points = _integer(data, "points")
    if points < 0:
        raise ValueError(f"'points' must not be negative, got {points}")
    return points


def _optional_text(data: dict[str, Any], key: str) -> Optional[str]:
    if data.get(key) is None:
        return None
    return _text(data, key)


def _flag(data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false, got {value!r}")
    return value


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def user_to_dict(user: domain.User) -> dict[str, Any]:
    return {"id": user.id, "name": user.name, "role": user.role.value, "avatar": user.avatar}


def user_from_dict(data: dict[str, Any]) -> domain.User:
    return domain.User(
        id=_text(data, "id"),
        name=_text(data, "name"),
        role=domain.UserRole(data["role"]),
        avatar=_text(data, "avatar") if "avatar" in data else "",
    )


def score_item_to_dict(item: domain.ScoreItem) -> dict[str, Any]:
    return _drop_none(
        {
            "id": item.id,
            "label": item.label,
            "points": item.points,
            "type": item.type.value,
            "icon": item.icon,
        }
    )


def score_item_from_dict(data: dict[str, Any]) -> domain.ScoreItem:
    return domain.ScoreItem(
        id=_text(data, "id"),
        label=_text(data, "label"),
        points=_points(data),
        type=domain.ScoreType(data["type"]),
        icon=_optional_text(data, "icon"),
    )


def reward_item_to_dict(reward: domain.RewardItem) -> dict[str, Any]:
    return _drop_none(
        {"id": reward.id, "label": reward.label, "points": reward.points, "icon": reward.icon}
    )


def reward_item_from_dict(data: dict[str, Any]) -> domain.RewardItem:
    return domain.RewardItem(
        id=_text(data, "id"),
        label=_text(data, "label"),
        points=_points(data),
        icon=_optional_text(data, "icon"),
    )


def score_record_to_dict(record: domain.ScoreRecord) -> dict[str, Any]:
    return _drop_none(
        {
            "id": record.id,
            "childId": record.child_id,
            "childName": record.child_name,
            "itemId": record.item_id,
            "itemName": record.item_name,
            "pointsChange": record.points_change,
            "timestamp": record.timestamp,
            "note": record.note,
            "createdById": record.created_by_id,
            "createdByName": record.created_by_name,
        }
    )


def score_record_from_dict(data: dict[str, Any]) -> domain.ScoreRecord:
    return domain.ScoreRecord(
        id=_text(data, "id"),
        child_id=_text(data, "childId"),
        child_name=_text(data, "childName"),
        item_id=_text(data, "itemId"),
        item_name=_text(data, "itemName"),
        points_change=_integer(data, "pointsChange"),
        timestamp=_integer(data, "timestamp"),
        created_by_id=_text(data, "createdById"),
        created_by_name=_text(data, "createdByName"),
        note=_optional_text(data, "note"),
    )


def secret_message_to_dict(message: domain.SecretMessage) -> dict[str, Any]:
    return {
        "id": message.id,
        "fromChildId": message.from_child_id,
        "fromChildName": message.from_child_name,
        "content": message.content,
        "timestamp": message.timestamp,
        "isRead": message.is_read,
    }


def secret_message_from_dict(data: dict[str, Any]) -> domain.SecretMessage:
    return domain.SecretMessage(
        id=_text(data, "id"),
        from_child_id=_text(data, "fromChildId"),
        from_child_name=_text(data, "fromChildName"),
        content=_text(data, "content"),
        timestamp=_integer(data, "timestamp"),
        is_read=_flag(data, "isRead"),
    )


def state_to_dict(state: domain.AppState) -> dict[str, Any]:
    """Encode a snapshot as a JSON-ready dict (collections only)."""
    return {
        "users": [user_to_dict(u) for u in state.users],
        "scoreItems": [score_item_to_dict(i) for i in state.score_items],
        "rewardItems": [reward_item_to_dict(r) for r in state.reward_items],
        "records": [score_record_to_dict(r) for r in state.records],
        "messages": [secret_message_to_dict(m) for m in state.messages],
    }


def _decode_collection(
    payload: dict[str, Any], key: str, decode: Callable[[dict[str, Any]], Any]
) -> tuple:
    entries = payload.get(key, [])
    if not isinstance(entries, list):
        raise InvalidBackupError(invalid_backup(f"'{key}' must be a list"))
    decoded = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidBackupError(invalid_backup(f"{key}[{position}] must be an object"))
        try:
            decoded.append(decode(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidBackupError(invalid_backup(f"{key}[{position}]: {e!r}")) from e
    return tuple(decoded)


def state_from_dict(payload: Any) -> domain.AppState:
    """Decode a snapshot from a parsed backup payload.

    Raises:
        InvalidBackupError: If required collections are missing or any entry is malformed
    """
    if not isinstance(payload, dict):
        raise InvalidBackupError(invalid_backup("expected a JSON object"))
    for key in REQUIRED_KEYS:
        if key not in payload:
            raise InvalidBackupError(invalid_backup(f"missing '{key}'"))

    return domain.AppState(
        users=_decode_collection(payload, "users", user_from_dict),
        score_items=_decode_collection(payload, "scoreItems", score_item_from_dict),
        reward_items=_decode_collection(payload, "rewardItems", reward_item_from_dict),
        records=_decode_collection(payload, "records", score_record_from_dict),
        messages=_decode_collection(payload, "messages", secret_message_from_dict),
    )


def dumps_state(state: domain.AppState) -> str:
    """Serialize a snapshot without backup metadata (fallback store blob)."""
    return json.dumps(state_to_dict(state), ensure_ascii=False)


def dumps_backup(state: domain.AppState, exported_at: Optional[datetime] = None) -> str:
    """Serialize a snapshot as a human-readable backup document."""
    if exported_at is None:
        exported_at = datetime.now(UTC)
    document = state_to_dict(state)
    document["exportedAt"] = exported_at.isoformat().replace("+00:00", "Z")
    document["version"] = BACKUP_VERSION
    return json.dumps(document, ensure_ascii=False, indent=2)


def loads_backup(text: Union[str, bytes]) -> domain.AppState:
    """Parse a backup document (or fallback blob) into a snapshot.

    Args:
        text: The document, either decoded or as raw UTF-8 bytes read from a file

    Raises:
        InvalidBackupError: If the text is not UTF-8, not valid JSON or not a valid backup
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidBackupError(invalid_backup(f"not UTF-8 text ({e.reason})")) from e
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidBackupError(invalid_backup(f"not valid JSON ({e})")) from e
    return state_from_dict(payload)
