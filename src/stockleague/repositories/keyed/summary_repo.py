"""RecordStore-backed SummaryRepository."""

from datetime import datetime
from typing import Optional

from stockleague.core.timezone import format_instant
from stockleague.domain.models import PositionSummary, PlayerSummary
from stockleague.repositories.keyed.codec import (
    player_prefix,
    player_summary_to_record,
    position_key,
    position_to_record,
    record_to_player_summary,
    record_to_position,
)
from stockleague.repositories.protocols.record_store import Partition, RecordStore


class KeyedSummaryRepository:
    """
    Position summaries keyed player#symbol; player summaries and stale marks
    keyed player.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    # Position summaries

    def get_positions(self, player_id: str) -> list[PositionSummary]:
        """Get all position summaries for a player, sorted by symbol."""
        records = self._store.query_by_prefix(
            Partition.POSITION_SUMMARY, player_prefix(player_id)
        )
        return sorted((record_to_position(r) for r in records), key=lambda p: p.symbol)

    def get_position(self, player_id: str, symbol: str) -> Optional[PositionSummary]:
        """Get the position summary for a specific symbol."""
        record = self._store.get(Partition.POSITION_SUMMARY, position_key(player_id, symbol))
        return record_to_position(record) if record else None

    def save_position(self, position: PositionSummary) -> PositionSummary:
        """Insert or replace a position summary."""
        self._store.put(
            Partition.POSITION_SUMMARY,
            position_key(position.player_id, position.symbol),
            position_to_record(position),
        )
        return position

    def delete_position(self, player_id: str, symbol: str) -> None:
        """Delete one position summary."""
        self._store.delete(Partition.POSITION_SUMMARY, position_key(player_id, symbol))

    # Player summaries

    def get_player_summary(self, player_id: str) -> Optional[PlayerSummary]:
        """Get the player summary."""
        record = self._store.get(Partition.PLAYER_SUMMARY, player_id)
        return record_to_player_summary(record) if record else None

    def save_player_summary(self, summary: PlayerSummary) -> PlayerSummary:
        """Insert or replace the player summary."""
        self._store.put(
            Partition.PLAYER_SUMMARY,
            summary.player_id,
            player_summary_to_record(summary),
        )
        return summary

    def delete_player_summary(self, player_id: str) -> None:
        """Delete the player summary."""
        self._store.delete(Partition.PLAYER_SUMMARY, player_id)

    # Stale marks

    def mark_stale(self, player_id: str, marked_at: datetime) -> None:
        """Record that a player's summaries may lag the ledger."""
        self._store.put(
            Partition.STALE_MARK,
            player_id,
            {"player_id": player_id, "marked_at": format_instant(marked_at)},
        )

    def clear_stale(self, player_id: str) -> None:
        """Remove a player's stale mark."""
        self._store.delete(Partition.STALE_MARK, player_id)

    def is_stale(self, player_id: str) -> bool:
        """Check whether a player carries a stale mark."""
        return self._store.get(Partition.STALE_MARK, player_id) is not None
