"""SQLAlchemy models for the familypoints store."""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Index,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from familypoints.database.schema import META_TABLE, Collection

Base = declarative_base()


def _indexes(collection: Collection) -> tuple[Index, ...]:
    return tuple(Index(ix.name, *ix.columns) for ix in collection.spec.indexes)


class User(Base):
    """Household member model."""

    __tablename__ = Collection.USERS.spec.table
    __table_args__ = _indexes(Collection.USERS)

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    avatar = Column(String, nullable=False)


class ScoreItem(Base):
    """Behavior definition model."""

    __tablename__ = Collection.SCORE_ITEMS.spec.table
    __table_args__ = _indexes(Collection.SCORE_ITEMS)

    id = Column(String, primary_key=True)
    label = Column(String, nullable=False)
    points = Column(Integer, nullable=False)
    type = Column(String, nullable=False)
    icon = Column(String, nullable=True)


class RewardItem(Base):
    """Reward definition model."""

    __tablename__ = Collection.REWARD_ITEMS.spec.table

    id = Column(String, primary_key=True)
    label = Column(String, nullable=False)
    points = Column(Integer, nullable=False)
    icon = Column(String, nullable=True)


class ScoreRecord(Base):
    """Ledger entry model."""

    __tablename__ = Collection.RECORDS.spec.table
    __table_args__ = _indexes(Collection.RECORDS)

    id = Column(String, primary_key=True)
    child_id = Column(String, nullable=False)
    child_name = Column(String, nullable=False)
    item_id = Column(String, nullable=False)
    item_name = Column(String, nullable=False)
    points_change = Column(Integer, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    note = Column(String, nullable=True)
    created_by_id = Column(String, nullable=False)
    created_by_name = Column(String, nullable=False)


class SecretMessage(Base):
    """Secret mailbox message model."""

    __tablename__ = Collection.MESSAGES.spec.table
    __table_args__ = _indexes(Collection.MESSAGES)

    id = Column(String, primary_key=True)
    from_child_id = Column(String, nullable=False)
    from_child_name = Column(String, nullable=False)
    content = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)


class SchemaMeta(Base):
    """Key/value metadata about the store itself, such as its schema version."""

    __tablename__ = META_TABLE

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)


# Ordered as the snapshot is written.
COLLECTION_MODELS = {
    Collection.USERS: User,
    Collection.SCORE_ITEMS: ScoreItem,
    Collection.REWARD_ITEMS: RewardItem,
    Collection.RECORDS: ScoreRecord,
    Collection.MESSAGES: SecretMessage,
}


def create_engine_for_url(database_url: str) -> Engine:
    """Create a SQLAlchemy engine.

    In-memory SQLite URLs share one connection so every session sees the
    same database.
    """
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=False)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory bound to `engine`."""
    return sessionmaker(bind=engine)
