"""Application state service.

The single load/save entry point for the rest of the application. Every
change is expressed as a new complete snapshot which `save_state` persists
in one transaction.
"""

import logging
from typing import Iterable, Optional, Union

from familypoints.database.base import Database
from familypoints.database.fallback import FALLBACK_KEY, FallbackStore
from familypoints.database.interchange import dumps_state, loads_backup
from familypoints.domain.defaults import default_state
from familypoints.domain.entities import AppState, CapacityInfo, SaveResult, ScoreRecord
from familypoints.domain.errors import DomainError
from familypoints.domain.ledger import calculate_score

logger = logging.getLogger(__name__)

# Usage percentage above which a save reports a storage warning.
STORAGE_WARNING_THRESHOLD = 80.0

FALLBACK_NOTE = "Saved to fallback storage"


class StateService:
    """Service for loading and saving the whole application snapshot."""

    def __init__(
        self,
        db: Database,
        fallback: Optional[FallbackStore] = None,
        warning_threshold: float = STORAGE_WARNING_THRESHOLD,
    ):
        """Initialize state service.

        Args:
            db: Database instance
            fallback: Store that receives the snapshot when the database rejects a write
            warning_threshold: Usage percentage that triggers a storage warning
        """
        self.db = db
        self.fallback = fallback
        self.warning_threshold = warning_threshold
        self._schema_ready = False

    def _prepare_store(self) -> None:
        """Create or upgrade the store's tables once per service.

        A failed attempt is retried on the next call.
        """
        if not self._schema_ready:
            self.db.initialize_schema()
            self._schema_ready = True

    def load_state(self) -> AppState:
        """Load the snapshot, creating and seeding an empty store first.

        Never raises for storage problems: if the store can't be opened, read
        or holds rows that don't decode, the built-in default snapshot is
        returned instead.
        """
        try:
            self._prepare_store()
            self.db.initialize()
            return self.db.read_all()
        except ValueError as e:
            logger.error("Failed to load state: %s", e)
            logger.warning("Store unavailable, using default data")
            return default_state()

    def save_state(self, state: AppState) -> SaveResult:
        """Persist the whole snapshot.

        Returns:
            SaveResult. `storage_warning` is set when usage is above the
            threshold. If the database write fails the snapshot is written to
            the fallback store; `success` is False only if that fails too.
        """
        try:
            self._prepare_store()
            self.db.replace_all(state)
        except DomainError as e:
            logger.error("Failed to save state: %s", e)
            return self._save_fallback(state, e)

        info = self.db.capacity_info()
        storage_warning = info.percentage > self.warning_threshold
        if storage_warning:
            logger.warning("Storage usage is high: %.1f%%", info.percentage)
        return SaveResult(success=True, storage_warning=storage_warning)

    def _save_fallback(self, state: AppState, error: DomainError) -> SaveResult:
        if self.fallback is None:
            return SaveResult(success=False, error=str(error))
        try:
            self.fallback.set_item(FALLBACK_KEY, dumps_state(state))
        except DomainError as fallback_error:
            logger.error("Fallback save failed: %s", fallback_error)
            return SaveResult(success=False, error=str(error))
        logger.warning("Snapshot written to fallback storage")
        return SaveResult(success=True, error=FALLBACK_NOTE, used_fallback=True)

    def read_fallback(self) -> Optional[AppState]:
        """Return the snapshot held in the fallback store, if any.

        Raises:
            StorageError: If the fallback store can't be read
            InvalidBackupError: If the stored blob is corrupt
        """
        if self.fallback is None:
            return None
        blob = self.fallback.get_item(FALLBACK_KEY)
        if blob is None:
            return None
        return loads_backup(blob)

    def restore_fallback(self) -> Optional[AppState]:
        """Write the fallback snapshot back into the database and clear it.

        Returns:
            The restored snapshot, or None if the fallback store is empty

        Raises:
            StorageError: If either store can't be read or written
            InvalidBackupError: If the stored blob is corrupt
        """
        state = self.read_fallback()
        if state is None:
            return None
        self._prepare_store()
        self.db.replace_all(state)
        self.fallback.remove_item(FALLBACK_KEY)
        logger.info("Restored snapshot from fallback storage")
        return state

    def calculate_score(self, child_id: str, records: Iterable[ScoreRecord]) -> int:
        """Return a child's current score derived from the ledger."""
        return calculate_score(child_id, records)

    def records_for_child(self, child_id: str, days: Optional[int] = None) -> list[ScoreRecord]:
        """List a child's ledger entries from the store, newest first."""
        self._prepare_store()
        return self.db.records_for_child(child_id, days)

    def unread_message_count(self) -> int:
        """Count unread secret messages in the store."""
        self._prepare_store()
        return self.db.unread_message_count()

    def capacity_info(self) -> CapacityInfo:
        """Report storage usage."""
        return self.db.capacity_info()

    def prune_older_than(self, days: int) -> int:
        """Delete ledger entries older than `days` days. Returns the count deleted."""
        self._prepare_store()
        return self.db.prune_older_than(days)

    def export_snapshot(self) -> str:
        """Return the whole store as a backup document."""
        self._prepare_store()
        return self.db.export_snapshot()

    def import_snapshot(self, text: Union[str, bytes]) -> None:
        """Replace the whole store with a backup document.

        Raises:
            InvalidBackupError: If the document is malformed; storage is untouched
        """
        self._prepare_store()
        self.db.import_snapshot(text)
