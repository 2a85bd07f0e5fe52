"""Tests for the application state service."""

import json
from dataclasses import replace

import pytest

from conftest import make_message, make_record
from familypoints.database.factories import create_sqlite_database
from familypoints.database.fallback import FALLBACK_KEY, FallbackStore
from familypoints.database.interchange import loads_backup
from familypoints.domain.defaults import default_state
from familypoints.domain.errors import InvalidBackupError, SchemaVersionError, StorageError
from familypoints.domain.ledger import LedgerService
from familypoints.domain.state import FALLBACK_NOTE, StateService


def _raise_storage_error(*args, **kwargs):
    raise StorageError("disk full")


def _raise_schema_error(*args, **kwargs):
    raise SchemaVersionError("Store uses schema version 9, newer than supported version 1")


class TestLoadState:
    """Tests for loading the snapshot."""

    def test_fresh_store_is_seeded(self, state_service):
        state = state_service.load_state()

        assert state == default_state()

    def test_load_failure_returns_default_state(self, state_service, temp_db, monkeypatch):
        monkeypatch.setattr(temp_db, "initialize", _raise_storage_error)

        assert state_service.load_state() == default_state()

    def test_fresh_file_is_created_seeded_and_persists(self, tmp_path):
        db_path = str(tmp_path / "fresh.db")
        db = create_sqlite_database(database_path=db_path)
        try:
            service = StateService(db)
            state = service.load_state()
            assert state == default_state()

            state, _ = LedgerService().log_behavior(state, "child_1", "item_1", "parent_1")
            result = service.save_state(state)
        finally:
            db.disconnect()

        assert result.success is True
        assert result.used_fallback is False

        db = create_sqlite_database(database_path=db_path)
        try:
            reloaded = StateService(db).load_state()
        finally:
            db.disconnect()

        assert len(reloaded.records) == 1
        assert StateService(db).calculate_score("child_1", reloaded.records) == 10

    def test_newer_schema_returns_default_state(self, temp_db, monkeypatch):
        monkeypatch.setattr(temp_db, "initialize_schema", _raise_schema_error)

        assert StateService(temp_db).load_state() == default_state()

    def test_undecodable_row_returns_default_state(self, state_service, temp_db):
        state_service.load_state()
        with temp_db.engine.begin() as conn:
            conn.exec_driver_sql("UPDATE users SET role = 'GUARDIAN' WHERE id = 'child_1'")

        assert state_service.load_state() == default_state()

    def test_new_session_sees_saved_record(self, state_service, temp_db):
        state = state_service.load_state()
        state, _ = LedgerService().log_behavior(state, "child_1", "item_1", "parent_1")
        assert state_service.save_state(state).success

        # A second session on the same database file
        db = create_sqlite_database(database_path=temp_db.database_path)
        try:
            reloaded = StateService(db).load_state()
        finally:
            db.disconnect()

        assert len(reloaded.records) == 1
        assert reloaded.records[0].points_change == 10
        assert StateService(temp_db).calculate_score("child_1", reloaded.records) == 10


class TestSaveState:
    """Tests for saving the snapshot."""

    def test_successful_save(self, state_service, temp_db):
        state = replace(default_state(), records=(make_record("r1"),))

        result = state_service.save_state(state)

        assert result.success is True
        assert result.error is None
        assert result.storage_warning is False
        assert result.used_fallback is False
        assert temp_db.read_all() == state

    def test_storage_warning_above_threshold(self, tmp_path):
        db = create_sqlite_database(database_path=str(tmp_path / "small.db"), quota_bytes=1)
        try:
            result = StateService(db).save_state(default_state())
        finally:
            db.disconnect()

        assert result.success is True
        assert result.storage_warning is True

    def test_no_warning_when_capacity_unknown(self, state_service, temp_db):
        temp_db.estimator = None
        assert state_service.save_state(default_state()).storage_warning is False

    def test_write_failure_uses_fallback(self, state_service, temp_db, fallback_store, monkeypatch):
        monkeypatch.setattr(temp_db, "replace_all", _raise_storage_error)
        state = replace(default_state(), records=(make_record("r1"),))

        result = state_service.save_state(state)

        assert result.success is True
        assert result.used_fallback is True
        assert result.error == FALLBACK_NOTE
        assert loads_backup(fallback_store.get_item(FALLBACK_KEY)) == state
        assert state_service.read_fallback() == state

    def test_both_stores_failing(self, temp_db, tmp_path, monkeypatch):
        monkeypatch.setattr(temp_db, "replace_all", _raise_storage_error)
        service = StateService(temp_db, fallback=FallbackStore(str(tmp_path)))

        result = service.save_state(default_state())

        assert result.success is False
        assert "disk full" in result.error

    def test_without_fallback_store(self, temp_db, monkeypatch):
        monkeypatch.setattr(temp_db, "replace_all", _raise_storage_error)

        result = StateService(temp_db).save_state(default_state())

        assert result.success is False
        assert StateService(temp_db).read_fallback() is None

    def test_sequential_saves_last_wins(self, state_service, temp_db):
        first = replace(default_state(), records=(make_record("r1"),))
        second = replace(default_state(), records=(make_record("r2"),))

        state_service.save_state(first)
        state_service.save_state(second)

        assert [r.id for r in temp_db.read_all().records] == ["r2"]


class TestBackup:
    """Tests for export and import through the state service."""

    def test_export_import_round_trip(self, state_service, temp_db):
        state = replace(default_state(), records=(make_record("r1"), make_record("r2", "child_2", -5)))
        state_service.save_state(state)

        text = state_service.export_snapshot()
        state_service.save_state(default_state())
        state_service.import_snapshot(text)

        assert temp_db.read_all() == state
        assert json.loads(text)["version"] == "2.0"

    def test_invalid_import_leaves_store_untouched(self, state_service, temp_db):
        state = replace(default_state(), records=(make_record("r1"),))
        state_service.save_state(state)

        with pytest.raises(InvalidBackupError, match="Invalid backup format"):
            state_service.import_snapshot('{"scoreItems": []}')

        assert temp_db.read_all() == state

    def test_prune_through_service(self, state_service):
        state = replace(
            default_state(),
            records=(make_record("old", days_ago=400), make_record("new", days_ago=1)),
        )
        state_service.save_state(state)

        assert state_service.prune_older_than(365) == 1
        assert [r.id for r in state_service.load_state().records] == ["new"]


class TestFallbackRestore:
    """Tests for moving a fallback snapshot back into the database."""

    def test_restore_replaces_store_and_clears_fallback(
        self, state_service, temp_db, fallback_store, monkeypatch
    ):
        state = replace(default_state(), records=(make_record("r1"),))
        with monkeypatch.context() as m:
            m.setattr(temp_db, "replace_all", _raise_storage_error)
            assert state_service.save_state(state).used_fallback is True

        assert state_service.restore_fallback() == state
        assert temp_db.read_all() == state
        assert fallback_store.get_item(FALLBACK_KEY) is None
        assert state_service.read_fallback() is None

    def test_restore_with_empty_fallback(self, state_service, temp_db):
        state_service.load_state()

        assert state_service.restore_fallback() is None
        assert temp_db.read_all() == default_state()


class TestStoreQueries:
    """Tests for queries answered by the store."""

    def test_records_for_child(self, state_service):
        state = replace(
            default_state(),
            records=(
                make_record("old", days_ago=10),
                make_record("new", days_ago=1),
                make_record("other", "child_2"),
            ),
        )
        state_service.save_state(state)

        assert [r.id for r in state_service.records_for_child("child_1")] == ["new", "old"]
        assert [r.id for r in state_service.records_for_child("child_1", days=5)] == ["new"]

    def test_unread_message_count(self, state_service):
        state = replace(
            default_state(),
            messages=(make_message("m1"), make_message("m2", is_read=True)),
        )
        state_service.save_state(state)

        assert state_service.unread_message_count() == 1
