"""Factory functions for creating database and fallback store instances."""

import os
from pathlib import Path
from typing import Optional

from familypoints.database.capacity import FileQuotaEstimator
from familypoints.database.fallback import FallbackStore
from familypoints.database.sqlalchemy_db import SQLAlchemyDatabase
from familypoints.domain.errors import ValidationError

DB_PATH_ENV = "FAMILYPOINTS_DB_PATH"
FALLBACK_PATH_ENV = "FAMILYPOINTS_FALLBACK_PATH"
QUOTA_ENV = "FAMILYPOINTS_QUOTA_BYTES"


def default_data_dir() -> Path:
    """Return ~/.familypoints, creating it if needed."""
    data_dir = Path.home() / ".familypoints"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def _quota_from_env() -> Optional[int]:
    raw = os.environ.get(QUOTA_ENV)
    if not raw:
        return None
    try:
        quota = int(raw)
    except ValueError:
        quota = -1
    if quota < 0:
        raise ValidationError(f"{QUOTA_ENV} must be a non-negative number of bytes, got '{raw}'")
    return quota


def create_sqlite_database(
    database_path: Optional[str] = None, quota_bytes: Optional[int] = None
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FAMILYPOINTS_DB_PATH
            environment variable, then defaults to ~/.familypoints/familypoints.db
        quota_bytes: Storage quota for capacity reporting. If None, checks
            FAMILYPOINTS_QUOTA_BYTES, then uses the size of the filesystem

    Returns:
        SQLAlchemyDatabase instance configured for SQLite

    Raises:
        ValidationError: If FAMILYPOINTS_QUOTA_BYTES is not a non-negative integer
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        database_path = str(default_data_dir() / "familypoints.db")

    if quota_bytes is None:
        quota_bytes = _quota_from_env()

    estimator = FileQuotaEstimator(database_path, quota_bytes=quota_bytes)
    return SQLAlchemyDatabase(f"sqlite:///{database_path}", estimator=estimator)


def create_memory_database() -> SQLAlchemyDatabase:
    """Create an in-memory SQLite database. Capacity is reported as unknown."""
    return SQLAlchemyDatabase("sqlite://")


def create_fallback_store(fallback_path: Optional[str] = None) -> FallbackStore:
    """Create the fallback key-value store.

    Args:
        fallback_path: Path to the JSON file. If None, checks FAMILYPOINTS_FALLBACK_PATH
            environment variable, then defaults to ~/.familypoints/fallback.json
    """
    if fallback_path is None:
        fallback_path = os.environ.get(FALLBACK_PATH_ENV)

    if fallback_path is None:
        fallback_path = str(default_data_dir() / "fallback.json")

    return FallbackStore(fallback_path)
