"""Player service: registration, lookup and credentials."""

import logging
import threading
import uuid
from typing import Optional

from stockleague.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from stockleague.core.passwords import hash_password, verify_password
from stockleague.core.timezone import now_utc
from stockleague.domain.models import Player
from stockleague.repositories.protocols import PlayerRepository

logger = logging.getLogger(__name__)


class PlayerService:
    """Service for managing league players."""

    def __init__(self, player_repo: PlayerRepository, default_password: str = "changeme"):
        self._player_repo = player_repo
        self._default_password = default_password
        # Serializes the name check and insert of new players.
        self._registry_lock = threading.RLock()

    def register(self, name: str, password: Optional[str] = None) -> Player:
        """
        Create a new player.

        Without a password the player gets the league's default credential.

        Raises:
            ValidationError: If the name is empty or already taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Player name is required")
        with self._registry_lock:
            if self._player_repo.get_by_name(name):
                raise ValidationError(f"Player '{name}' already exists")

            player = Player(
                player_id=uuid.uuid4().hex,
                name=name,
                password_hash=hash_password(password or self._default_password),
                created_at=now_utc(),
            )
            self._player_repo.save(player)
        logger.info("Registered player %s (%s)", player.name, player.player_id)
        return player

    def get_player(self, player_id: str) -> Player:
        """
        Get a player by ID.

        Raises:
            NotFoundError: If the player does not exist
        """
        player = self._player_repo.get_by_id(player_id)
        if player is None:
            raise NotFoundError("Player", player_id)
        return player

    def find_by_name(self, name: str) -> Optional[Player]:
        """Find a player by name, ignoring case and surrounding spaces."""
        return self._player_repo.get_by_name(name)

    def get_or_create(self, name: str) -> tuple[Player, bool]:
        """Return (player, created) for a name, registering it if unknown."""
        with self._registry_lock:
            existing = self.find_by_name(name)
            if existing:
                return existing, False
            return self.register(name), True

    def list_players(self) -> list[Player]:
        return self._player_repo.list_all()

    def change_password(self, player_id: str, current_password: str, new_password: str) -> Player:
        """
        Replace a player's password after checking the current one.

        Raises:
            NotFoundError: If the player does not exist
            ValidationError: If either password is missing
            AuthenticationError: If the current password does not match
        """
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        player = self.get_player(player_id)
        if not verify_password(current_password, player.password_hash):
            raise AuthenticationError()

        player.password_hash = hash_password(new_password)
        self._player_repo.save(player)
        logger.info("Password changed for player %s", player_id)
        return player

    def authenticate(self, name: str, password: str) -> Player:
        """
        Return the player whose name and password match.

        Raises:
            AuthenticationError: On unknown name or wrong password
        """
        if not name or not password:
            raise ValidationError("Name and password are required")
        player = self.find_by_name(name)
        if player is None or not verify_password(password, player.password_hash):
            raise AuthenticationError("Invalid name or password")
        return player
