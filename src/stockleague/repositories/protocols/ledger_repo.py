"""Ledger repository protocol."""

from typing import Protocol

from stockleague.domain.models import LedgerEntry


class LedgerRepository(Protocol):
    """Interface for append-only ledger data access."""

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Persist a new entry."""
        ...

    def list_by_player(self, player_id: str) -> list[LedgerEntry]:
        """List all entries of a player, ordered by timestamp."""
        ...

    def list_all(self) -> list[LedgerEntry]:
        """List every entry in the ledger, ordered by timestamp."""
        ...

    def delete_by_player(self, player_id: str) -> int:
        """Delete all entries of a player; returns how many were removed."""
        ...
