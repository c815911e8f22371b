"""Player repository protocol."""

from typing import Protocol, Optional

from stockleague.domain.models import Player


class PlayerRepository(Protocol):
    """Interface for player data access."""

    def save(self, player: Player) -> Player:
        """Insert or update a player."""
        ...

    def get_by_id(self, player_id: str) -> Optional[Player]:
        """Retrieve player by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Player]:
        """Retrieve player by name (case-insensitive)."""
        ...

    def list_all(self) -> list[Player]:
        """List all players."""
        ...
