"""Generic SQLAlchemy database implementation."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from familypoints.database import migrations, schema
from familypoints.database.base import Database
from familypoints.database.capacity import Estimator, estimate_capacity
from familypoints.database.interchange import dumps_backup, loads_backup
from familypoints.database.mappers import (
    reward_item_to_domain,
    reward_item_to_row,
    score_item_to_domain,
    score_item_to_row,
    score_record_to_domain,
    score_record_to_row,
    secret_message_to_domain,
    secret_message_to_row,
    user_to_domain,
    user_to_row,
)
from familypoints.database.models import (
    Base,
    COLLECTION_MODELS,
    RewardItem,
    SchemaMeta,
    ScoreItem,
    ScoreRecord,
    SecretMessage,
    User,
    create_engine_for_url,
    create_session_factory,
)
from familypoints.domain.defaults import default_state
from familypoints.domain.entities import (
    AppState,
    CapacityInfo,
    ScoreRecord as DomainScoreRecord,
)
from familypoints.domain.errors import (
    SchemaVersionError,
    StorageError,
    ValidationError,
    storage_failure,
)
from familypoints.utils.clock import cutoff_ms

logger = logging.getLogger(__name__)


def _rows(state: AppState) -> dict[schema.Collection, list[dict]]:
    return {
        schema.Collection.USERS: [user_to_row(u) for u in state.users],
        schema.Collection.SCORE_ITEMS: [score_item_to_row(i) for i in state.score_items],
        schema.Collection.REWARD_ITEMS: [reward_item_to_row(r) for r in state.reward_items],
        schema.Collection.RECORDS: [score_record_to_row(r) for r in state.records],
        schema.Collection.MESSAGES: [secret_message_to_row(m) for m in state.messages],
    }


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str, estimator: Optional[Estimator] = None):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db',
                or 'sqlite://' for an in-memory store)
            estimator: Callable reporting storage usage and quota; capacity is
                reported as unknown when None
        """
        self.database_url = database_url
        self.estimator = estimator
        self.engine = create_engine_for_url(database_url)
        self.session_factory = create_session_factory(self.engine)

    @contextmanager
    def _transaction(self, action: str) -> Iterator[Session]:
        """Yield a session inside one transaction.

        Commits on success and rolls back on any error; driver errors are
        re-raised as StorageError.
        """
        session = self.session_factory()
        try:
            with session.begin():
                yield session
        except SQLAlchemyError as e:
            logger.error("Storage operation '%s' failed: %s", action, e)
            raise StorageError(storage_failure(action, e)) from e
        finally:
            session.close()

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        self.engine.dispose()

    def _stored_version(self, session: Session) -> Optional[int]:
        meta = session.get(SchemaMeta, schema.VERSION_KEY)
        return int(meta.value) if meta is not None else None

    def initialize_schema(self) -> None:
        """Create tables, record or migrate the schema version and verify it.

        Raises:
            SchemaVersionError: If the store is newer than this release or a
                migration step is missing
            StorageError: If the store cannot be opened
        """
        current = schema.SCHEMA_VERSION
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(storage_failure("create schema", e)) from e

        with self._transaction("check schema version") as session:
            stored = self._stored_version(session)
            if stored is None:
                session.add(SchemaMeta(key=schema.VERSION_KEY, value=str(current)))
            elif stored > current:
                raise SchemaVersionError(
                    f"Store uses schema version {stored}, newer than supported version {current}"
                )
            elif stored < current:
                migrations.apply_migrations(session.connection(), stored, current)
                session.get(SchemaMeta, schema.VERSION_KEY).value = str(current)

        try:
            schema.verify_schema(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(storage_failure("inspect schema", e)) from e

    def schema_version(self) -> Optional[int]:
        """Return the schema version recorded in the store."""
        with self._transaction("read schema version") as session:
            return self._stored_version(session)

    def initialize(self) -> bool:
        """Seed the default catalog if the store has no users."""
        with self._transaction("seed default catalog") as session:
            if session.query(User).count() > 0:
                return False

            logger.info("Empty store: seeding default catalog")
            seed = _rows(default_state())
            for collection in (
                schema.Collection.USERS,
                schema.Collection.SCORE_ITEMS,
                schema.Collection.REWARD_ITEMS,
            ):
                session.execute(insert(COLLECTION_MODELS[collection]), seed[collection])
        return True

    def read_all(self) -> AppState:
        """Read all five collections into one snapshot."""
        with self._transaction("read store") as session:
            return AppState(
                users=tuple(user_to_domain(u) for u in session.query(User).all()),
                score_items=tuple(score_item_to_domain(i) for i in session.query(ScoreItem).all()),
                reward_items=tuple(
                    reward_item_to_domain(r) for r in session.query(RewardItem).all()
                ),
                records=tuple(score_record_to_domain(r) for r in session.query(ScoreRecord).all()),
                messages=tuple(
                    secret_message_to_domain(m) for m in session.query(SecretMessage).all()
                ),
            )

    def _write_all(self, session: Session, state: AppState) -> None:
        for collection, rows in _rows(state).items():
            model = COLLECTION_MODELS[collection]
            session.query(model).delete()
            if rows:
                session.execute(insert(model), rows)

    def replace_all(self, state: AppState) -> None:
        """Atomically replace every collection with the snapshot's contents.

        Either all five collections are replaced or, on any failure, none are.
        """
        with self._transaction("save snapshot") as session:
            self._write_all(session, state)

    def capacity_info(self) -> CapacityInfo:
        """Report storage usage; returns an 'Unknown' result instead of failing."""
        return estimate_capacity(self.estimator)

    def prune_older_than(self, days: int) -> int:
        """Delete ledger entries older than `days` days.

        Args:
            days: Retention window, a positive integer

        Returns:
            Number of entries deleted

        Raises:
            ValidationError: If days is not a positive integer
        """
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise ValidationError(f"Days must be a positive integer, got {days!r}")

        cutoff = cutoff_ms(days)
        with self._transaction("prune old records") as session:
            deleted = (
                session.query(ScoreRecord)
                .filter(ScoreRecord.timestamp < cutoff)
                .delete(synchronize_session=False)
            )

        if deleted:
            logger.info("Pruned %d record%s older than %d days", deleted, "s" if deleted != 1 else "", days)
        return deleted

    def export_snapshot(self) -> str:
        """Serialize the whole store as a backup document."""
        return dumps_backup(self.read_all())

    def import_snapshot(self, text: Union[str, bytes]) -> None:
        """Validate a backup document, then atomically replace the store with it.

        Raises:
            InvalidBackupError: If the document is malformed; storage is untouched
        """
        state = loads_backup(text)
        with self._transaction("import backup") as session:
            self._write_all(session, state)
        logger.info(
            "Imported backup with %d users and %d records", len(state.users), len(state.records)
        )

    def records_for_child(
        self, child_id: str, days: Optional[int] = None
    ) -> list[DomainScoreRecord]:
        """List a child's ledger entries, newest first, optionally within `days` days."""
        with self._transaction("read child records") as session:
            query = session.query(ScoreRecord).filter(ScoreRecord.child_id == child_id)
            if days:
                query = query.filter(ScoreRecord.timestamp >= cutoff_ms(days))
            records = query.order_by(ScoreRecord.timestamp.desc()).all()
            return [score_record_to_domain(r) for r in records]

    def unread_message_count(self) -> int:
        """Count unread secret messages."""
        with self._transaction("count unread messages") as session:
            return session.query(SecretMessage).filter(SecretMessage.is_read.is_(False)).count()
