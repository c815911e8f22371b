"""Player domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Player:
    """
    League participant.

    Names are unique case-insensitively; the credential is a salted hash.
    """

    player_id: str
    name: str
    password_hash: str
    created_at: Optional[datetime] = field(default=None)

    @property
    def name_key(self) -> str:
        """Case-insensitive lookup key for the display name."""
        return self.name.strip().lower()
