"""RecordStore-backed PlayerRepository."""

from typing import Optional

from stockleague.domain.models import Player
from stockleague.repositories.keyed.codec import player_to_record, record_to_player
from stockleague.repositories.protocols.record_store import Partition, RecordStore


class KeyedPlayerRepository:
    """Players under the PLAYER partition, keyed by player id."""

    def __init__(self, store: RecordStore):
        self._store = store

    def save(self, player: Player) -> Player:
        """Insert or update a player."""
        self._store.put(Partition.PLAYER, player.player_id, player_to_record(player))
        return player

    def get_by_id(self, player_id: str) -> Optional[Player]:
        """Retrieve player by ID."""
        record = self._store.get(Partition.PLAYER, player_id)
        return record_to_player(record) if record else None

    def get_by_name(self, name: str) -> Optional[Player]:
        """Retrieve player by name (case-insensitive)."""
        wanted = name.strip().lower()
        for player in self.list_all():
            if player.name_key == wanted:
                return player
        return None

    def list_all(self) -> list[Player]:
        """List all players, ordered by name."""
        records = self._store.query_by_prefix(Partition.PLAYER, "")
        return sorted((record_to_player(r) for r in records), key=lambda p: p.name_key)
