"""Typed description of the durable store.

Every collection and secondary index is declared here once. The ORM models
build their indexes from these descriptors and `verify_schema` checks a live
store against them at startup.
"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from familypoints.domain.errors import SchemaVersionError

# Bump when the table layout changes and register a step in migrations.py.
SCHEMA_VERSION = 1

META_TABLE = "schema_meta"
VERSION_KEY = "version"


@dataclass(frozen=True)
class IndexSpec:
    """Named secondary index over one or more columns."""

    name: str
    columns: tuple[str, ...]


@dataclass(frozen=True)
class CollectionSpec:
    """One collection: its table, primary key and secondary indexes."""

    table: str
    key: str
    indexes: tuple[IndexSpec, ...] = ()


class Collection(Enum):
    """The five collections that make up a snapshot."""

    USERS = CollectionSpec(
        table="users",
        key="id",
        indexes=(IndexSpec("ix_users_role", ("role",)),),
    )
    SCORE_ITEMS = CollectionSpec(
        table="score_items",
        key="id",
        indexes=(IndexSpec("ix_score_items_type", ("type",)),),
    )
    REWARD_ITEMS = CollectionSpec(table="reward_items", key="id")
    RECORDS = CollectionSpec(
        table="records",
        key="id",
        indexes=(
            IndexSpec("ix_records_child_id", ("child_id",)),
            IndexSpec("ix_records_timestamp", ("timestamp",)),
        ),
    )
    MESSAGES = CollectionSpec(
        table="messages",
        key="id",
        indexes=(
            IndexSpec("ix_messages_from_child_id", ("from_child_id",)),
            IndexSpec("ix_messages_is_read", ("is_read",)),
            IndexSpec("ix_messages_timestamp", ("timestamp",)),
        ),
    )

    @property
    def spec(self) -> CollectionSpec:
        return self.value


def verify_schema(engine: Engine) -> None:
    """Check that every declared table and index exists in the store.

    Raises:
        SchemaVersionError: If a table or index is missing
    """
    inspector = inspect(engine)
    tables = set(inspector.get_table_names())
    missing = []

    for collection in Collection:
        spec = collection.spec
        if spec.table not in tables:
            missing.append(f"table '{spec.table}'")
            continue
        index_names = {ix["name"] for ix in inspector.get_indexes(spec.table)}
        for index in spec.indexes:
            if index.name not in index_names:
                missing.append(f"index '{index.name}' on '{spec.table}'")

    if META_TABLE not in tables:
        missing.append(f"table '{META_TABLE}'")

    if missing:
        raise SchemaVersionError(
            f"Store does not match schema version {SCHEMA_VERSION}: missing {', '.join(missing)}"
        )
