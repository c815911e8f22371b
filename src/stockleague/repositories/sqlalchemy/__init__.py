"""SQLAlchemy repository backend."""

from stockleague.repositories.sqlalchemy.database import (
    build_engine,
    build_session_factory,
    init_db,
    Base,
)
from stockleague.repositories.sqlalchemy.record_store import SqlAlchemyRecordStore

__all__ = [
    "build_engine",
    "build_session_factory",
    "init_db",
    "Base",
    "SqlAlchemyRecordStore",
]
