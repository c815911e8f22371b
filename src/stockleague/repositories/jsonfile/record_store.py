"""JSON file implementation of RecordStore."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from stockleague.core.exceptions import PersistenceError
from stockleague.repositories.protocols.record_store import Partition, Record

logger = logging.getLogger(__name__)


class JsonFileRecordStore:
    """
    File-backed record store: one JSON object (key -> record) per partition.

    Every write re-reads and rewrites the whole partition file. The rewrite
    goes through a temporary file and os.replace, so a single put/delete is
    all-or-nothing on disk, but writes spanning several keys or partitions
    are not atomic. Writers inside this process are serialized by a lock;
    other processes sharing the directory are not coordinated.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    def get(self, partition: Partition, key: str) -> Optional[Record]:
        with self._lock:
            return self._read(partition).get(key)

    def put(self, partition: Partition, key: str, record: Record) -> None:
        with self._lock:
            records = self._read(partition)
            records[key] = record
            self._write(partition, records, key)

    def query_by_prefix(self, partition: Partition, key_prefix: str) -> list[Record]:
        with self._lock:
            records = self._read(partition)
        return [record for key, record in records.items() if key.startswith(key_prefix)]

    def delete(self, partition: Partition, key: str) -> None:
        with self._lock:
            records = self._read(partition)
            if key not in records:
                return
            del records[key]
            self._write(partition, records, key)

    def _path(self, partition: Partition) -> Path:
        return self._data_dir / f"{partition.value.lower()}.json"

    def _read(self, partition: Partition) -> dict[str, Record]:
        path = self._path(partition)
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", path, e)
            raise PersistenceError("read", partition.value, "*", e) from e

    def _write(self, partition: Partition, records: dict[str, Record], key: str) -> None:
        path = self._path(partition)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{path.stem}-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, sort_keys=True)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error("Error writing %s: %s", path, e)
            raise PersistenceError("write", partition.value, key, e) from e
