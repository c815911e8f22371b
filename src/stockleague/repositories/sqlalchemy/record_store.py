"""SQLAlchemy implementation of RecordStore."""

import json
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from stockleague.core.exceptions import PersistenceError
from stockleague.repositories.protocols.record_store import Partition, Record
from stockleague.repositories.sqlalchemy.orm_models import RecordORM

logger = logging.getLogger(__name__)


class SqlAlchemyRecordStore:
    """
    Table-backed record store.

    Each call opens its own session and commits on its own, mirroring a
    per-key request against a remote partitioned table.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get(self, partition: Partition, key: str) -> Optional[Record]:
        try:
            with self._session_factory() as session:
                orm_record = session.get(RecordORM, (partition.value, key))
                return json.loads(orm_record.payload) if orm_record else None
        except SQLAlchemyError as e:
            raise self._failure("get", partition, key, e) from e

    def put(self, partition: Partition, key: str, record: Record) -> None:
        try:
            with self._session_factory() as session:
                orm_record = session.get(RecordORM, (partition.value, key))
                payload = json.dumps(record, sort_keys=True)
                if orm_record:
                    orm_record.payload = payload
                else:
                    session.add(RecordORM(partition=partition.value, key=key, payload=payload))
                session.commit()
        except SQLAlchemyError as e:
            raise self._failure("put", partition, key, e) from e

    def query_by_prefix(self, partition: Partition, key_prefix: str) -> list[Record]:
        try:
            with self._session_factory() as session:
                rows = (
                    session.query(RecordORM)
                    .filter(
                        RecordORM.partition == partition.value,
                        RecordORM.key.startswith(key_prefix, autoescape=True),
                    )
                    .all()
                )
                return [json.loads(row.payload) for row in rows]
        except SQLAlchemyError as e:
            raise self._failure("query", partition, key_prefix, e) from e

    def delete(self, partition: Partition, key: str) -> None:
        try:
            with self._session_factory() as session:
                session.query(RecordORM).filter(
                    RecordORM.partition == partition.value,
                    RecordORM.key == key,
                ).delete()
                session.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete", partition, key, e) from e

    @staticmethod
    def _failure(operation: str, partition: Partition, key: str, e: Exception) -> PersistenceError:
        logger.error("Record %s failed for %s/%s: %s", operation, partition.value, key, e)
        return PersistenceError(operation, partition.value, key, e)
