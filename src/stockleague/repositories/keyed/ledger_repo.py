"""RecordStore-backed LedgerRepository."""

from stockleague.domain.models import LedgerEntry
from stockleague.repositories.keyed.codec import (
    entry_to_record,
    ledger_key,
    player_prefix,
    record_to_entry,
)
from stockleague.repositories.protocols.record_store import Partition, RecordStore


def _chronological(entries: list[LedgerEntry]) -> list[LedgerEntry]:
    return sorted(entries, key=lambda e: (e.timestamp, e.entry_id))


class KeyedLedgerRepository:
    """Ledger entries under the LEDGER partition, keyed player#timestamp#id."""

    def __init__(self, store: RecordStore):
        self._store = store

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Persist a new entry."""
        self._store.put(Partition.LEDGER, ledger_key(entry), entry_to_record(entry))
        return entry

    def list_by_player(self, player_id: str) -> list[LedgerEntry]:
        """List all entries of a player, ordered by timestamp."""
        records = self._store.query_by_prefix(Partition.LEDGER, player_prefix(player_id))
        return _chronological([record_to_entry(r) for r in records])

    def list_all(self) -> list[LedgerEntry]:
        """List every entry in the ledger, ordered by timestamp."""
        records = self._store.query_by_prefix(Partition.LEDGER, "")
        return _chronological([record_to_entry(r) for r in records])

    def delete_by_player(self, player_id: str) -> int:
        """Delete all entries of a player; returns how many were removed."""
        entries = self.list_by_player(player_id)
        for entry in entries:
            self._store.delete(Partition.LEDGER, ledger_key(entry))
        return len(entries)
