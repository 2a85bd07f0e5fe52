"""Database layer for familypoints application."""

from familypoints.database.base import Database
from familypoints.database.factories import (
    create_fallback_store,
    create_memory_database,
    create_sqlite_database,
)
from familypoints.database.fallback import FALLBACK_KEY, FallbackStore

__all__ = [
    "Database",
    "FallbackStore",
    "FALLBACK_KEY",
    "create_fallback_store",
    "create_memory_database",
    "create_sqlite_database",
]
