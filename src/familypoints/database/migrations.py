"""Additive schema migrations.

Each step upgrades the store from `version - 1` to `version` and must keep
existing rows. New tables are created by `create_all` before migrations run,
so steps only need to alter existing tables, e.g.::

    def _add_record_kind(connection):
        if not column_exists(connection, "records", "kind"):
            connection.execute(text("ALTER TABLE records ADD COLUMN kind VARCHAR"))

    MIGRATIONS[2] = _add_record_kind
"""

import logging
from typing import Callable

from sqlalchemy import inspect
from sqlalchemy.engine import Connection

from familypoints.domain.errors import SchemaVersionError

logger = logging.getLogger(__name__)

Migration = Callable[[Connection], None]

MIGRATIONS: dict[int, Migration] = {}


def column_exists(connection: Connection, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    columns = [col["name"] for col in inspect(connection).get_columns(table_name)]
    return column_name in columns


def apply_migrations(connection: Connection, from_version: int, to_version: int) -> None:
    """Run every registered step between two versions, in order.

    Raises:
        SchemaVersionError: If a step in the range is not registered
    """
    for version in range(from_version + 1, to_version + 1):
        step = MIGRATIONS.get(version)
        if step is None:
            raise SchemaVersionError(f"No migration registered for schema version {version}")
        logger.info("Migrating store to schema version %d", version)
        step(connection)
