"""Shared pytest fixtures for familypoints tests."""

import os
import tempfile

import pytest

from familypoints.database.factories import create_sqlite_database
from familypoints.database.fallback import FallbackStore
from familypoints.domain.catalog import CatalogService
from familypoints.domain.defaults import default_state
from familypoints.domain.entities import ScoreRecord, SecretMessage
from familypoints.domain.ledger import LedgerService
from familypoints.domain.mailbox import MailboxService
from familypoints.domain.state import StateService
from familypoints.utils.clock import MS_PER_DAY, now_ms


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path, quota_bytes=1024**3)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def fallback_store(tmp_path):
    """Create a fallback store in a temporary directory."""
    return FallbackStore(str(tmp_path / "fallback.json"))


@pytest.fixture
def state_service(temp_db, fallback_store):
    """Create a StateService with a temporary database and fallback store."""
    return StateService(temp_db, fallback=fallback_store)


@pytest.fixture
def ledger_service():
    return LedgerService()


@pytest.fixture
def catalog_service():
    return CatalogService()


@pytest.fixture
def mailbox_service():
    return MailboxService()


@pytest.fixture
def seed_state():
    """The built-in default snapshot."""
    return default_state()


def make_record(
    record_id: str,
    child_id: str = "child_1",
    points_change: int = 10,
    days_ago: int = 0,
    item_name: str = "Chores",
) -> ScoreRecord:
    """Build a ledger entry timestamped `days_ago` days before now."""
    return ScoreRecord(
        id=record_id,
        child_id=child_id,
        child_name="Ethan" if child_id == "child_1" else "Yoyo",
        item_id="item_1",
        item_name=item_name,
        points_change=points_change,
        timestamp=now_ms() - days_ago * MS_PER_DAY,
        created_by_id="parent_1",
        created_by_name="Mom & Dad",
    )


def make_message(message_id: str, is_read: bool = False, timestamp: int = 1_700_000_000_000) -> SecretMessage:
    """Build a secret message from child_1."""
    return SecretMessage(
        id=message_id,
        from_child_id="child_1",
        from_child_name="Ethan",
        content="I love you",
        timestamp=timestamp,
        is_read=is_read,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db, tmp_path):
    """Global CLI options pointing at the temporary stores."""
    return [
        "--db-path",
        temp_db.database_path,
        "--fallback-path",
        str(tmp_path / "fallback.json"),
    ]
