"""Key-partitioned record store protocol."""

from enum import Enum
from typing import Any, Optional, Protocol

Record = dict[str, Any]


class Partition(str, Enum):
    """Logical partitions of the league store."""

    PLAYER = "PLAYER"
    LEDGER = "LEDGER"
    POSITION_SUMMARY = "POSITION_SUMMARY"
    PLAYER_SUMMARY = "PLAYER_SUMMARY"
    STALE_MARK = "STALE_MARK"


class RecordStore(Protocol):
    """
    Interface for the persistence backend.

    Records are JSON-compatible dicts addressed by (partition, key).
    put and delete are idempotent; there are no multi-key transactions.
    Backend failures surface as PersistenceError.
    """

    def get(self, partition: Partition, key: str) -> Optional[Record]:
        """Return the record stored under key, or None."""
        ...

    def put(self, partition: Partition, key: str, record: Record) -> None:
        """Insert or replace the record stored under key."""
        ...

    def query_by_prefix(self, partition: Partition, key_prefix: str) -> list[Record]:
        """Return all records whose key starts with key_prefix (unordered)."""
        ...

    def delete(self, partition: Partition, key: str) -> None:
        """Remove the record stored under key; missing keys are ignored."""
        ...
