"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union

# Import entities directly to avoid circular import through domain/__init__.py
from familypoints.domain.entities import AppState, CapacityInfo, ScoreRecord


class Database(ABC):
    """Abstract persistence engine for familypoints.

    Implementations never let a driver exception escape: every storage
    failure is raised as `familypoints.domain.errors.StorageError`.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create tables, record or migrate the schema version and verify it."""
        pass

    @abstractmethod
    def initialize(self) -> bool:
        """Seed the default catalog if the store has no users.

        Safe to call on every startup. Returns True if it seeded.
        """
        pass

    @abstractmethod
    def read_all(self) -> AppState:
        """Read all five collections into one snapshot."""
        pass

    @abstractmethod
    def replace_all(self, state: AppState) -> None:
        """Atomically replace every collection with the snapshot's contents."""
        pass

    @abstractmethod
    def capacity_info(self) -> CapacityInfo:
        """Report storage usage; returns an 'Unknown' result instead of failing."""
        pass

    @abstractmethod
    def prune_older_than(self, days: int) -> int:
        """Delete ledger entries older than `days` days. Returns the count deleted."""
        pass

    @abstractmethod
    def export_snapshot(self) -> str:
        """Serialize the whole store as a backup document."""
        pass

    @abstractmethod
    def import_snapshot(self, text: Union[str, bytes]) -> None:
        """Validate a backup document, then atomically replace the store with it."""
        pass

    @abstractmethod
    def records_for_child(self, child_id: str, days: Optional[int] = None) -> list[ScoreRecord]:
        """List a child's ledger entries, newest first, optionally within `days` days."""
        pass

    @abstractmethod
    def unread_message_count(self) -> int:
        """Count unread secret messages."""
        pass
