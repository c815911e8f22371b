"""Summary repository protocol for derived data."""

from datetime import datetime
from typing import Protocol, Optional

from stockleague.domain.models import PositionSummary, PlayerSummary


class SummaryRepository(Protocol):
    """Interface for position and player summary data access."""

    # Position summaries
    def get_positions(self, player_id: str) -> list[PositionSummary]:
        """Get all position summaries for a player."""
        ...

    def get_position(self, player_id: str, symbol: str) -> Optional[PositionSummary]:
        """Get the position summary for a specific symbol."""
        ...

    def save_position(self, position: PositionSummary) -> PositionSummary:
        """Insert or replace a position summary."""
        ...

    def delete_position(self, player_id: str, symbol: str) -> None:
        """Delete one position summary."""
        ...

    # Player summaries
    def get_player_summary(self, player_id: str) -> Optional[PlayerSummary]:
        """Get the player summary."""
        ...

    def save_player_summary(self, summary: PlayerSummary) -> PlayerSummary:
        """Insert or replace the player summary."""
        ...

    def delete_player_summary(self, player_id: str) -> None:
        """Delete the player summary."""
        ...

    # Stale marks
    def mark_stale(self, player_id: str, marked_at: datetime) -> None:
        """Record that a player's summaries may lag the ledger."""
        ...

    def clear_stale(self, player_id: str) -> None:
        """Remove a player's stale mark."""
        ...

    def is_stale(self, player_id: str) -> bool:
        """Check whether a player carries a stale mark."""
        ...
