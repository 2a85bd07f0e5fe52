"""Domain model entities for familypoints.

These are pure data classes representing the household's users, catalog,
ledger and mailbox, independent of the database schema. Timestamps are
epoch milliseconds so they survive the backup format unchanged.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Item-name prefixes that mark a ledger entry as a reward redemption.
# Legacy prefixes appear in backups written by earlier releases.
REDEMPTION_PREFIX = "Redeemed: "
LEGACY_REDEMPTION_PREFIXES = ("兌換：",)


class UserRole(str, Enum):
    """Role of a household member."""

    PARENT = "PARENT"
    CHILD = "CHILD"


class ScoreType(str, Enum):
    """Polarity of a score item."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"


class RecordKind(str, Enum):
    """What produced a ledger entry."""

    BEHAVIOR = "BEHAVIOR"
    REDEMPTION = "REDEMPTION"


@dataclass(frozen=True)
class User:
    """Household member domain entity."""

    id: str
    name: str
    role: UserRole
    avatar: str

    @property
    def is_child(self) -> bool:
        return self.role == UserRole.CHILD


@dataclass(frozen=True)
class ScoreItem:
    """Behavior definition. `points` is always a non-negative magnitude."""

    id: str
    label: str
    points: int
    type: ScoreType
    icon: Optional[str] = None

    @property
    def signed_points(self) -> int:
        """Delta a ledger entry for this item carries."""
        return self.points if self.type == ScoreType.POSITIVE else -self.points


@dataclass(frozen=True)
class RewardItem:
    """Reward definition. `points` is the redemption cost."""

    id: str
    label: str
    points: int
    icon: Optional[str] = None


@dataclass(frozen=True)
class ScoreRecord:
    """Ledger entry.

    Child, item and creator names are copied at creation time so the history
    still reads correctly after the referenced entities are renamed or removed.
    """

    id: str
    child_id: str
    child_name: str
    item_id: str
    item_name: str
    points_change: int
    timestamp: int
    created_by_id: str
    created_by_name: str
    note: Optional[str] = None

    @property
    def kind(self) -> RecordKind:
        prefixes = (REDEMPTION_PREFIX,) + LEGACY_REDEMPTION_PREFIXES
        if self.item_name.startswith(prefixes):
            return RecordKind.REDEMPTION
        return RecordKind.BEHAVIOR


@dataclass(frozen=True)
class SecretMessage:
    """Message a child leaves for the parents. Only `is_read` ever changes."""

    id: str
    from_child_id: str
    from_child_name: str
    content: str
    timestamp: int
    is_read: bool = False


@dataclass(frozen=True)
class AppState:
    """Complete snapshot of all five collections; the unit of load and save."""

    users: tuple[User, ...] = ()
    score_items: tuple[ScoreItem, ...] = ()
    reward_items: tuple[RewardItem, ...] = ()
    records: tuple[ScoreRecord, ...] = ()
    messages: tuple[SecretMessage, ...] = ()


@dataclass(frozen=True)
class CapacityInfo:
    """Storage usage as reported by the hosting environment."""

    used_bytes: int
    quota_bytes: int
    percentage: float
    used_formatted: str
    quota_formatted: str


@dataclass(frozen=True)
class SaveResult:
    """Outcome of persisting a snapshot."""

    success: bool
    error: Optional[str] = None
    storage_warning: bool = False
    used_fallback: bool = False
