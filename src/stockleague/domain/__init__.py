"""Domain layer - pure business models with no external dependencies."""

from stockleague.domain.models import (
    EntryType,
    Player,
    LedgerEntry,
    PositionSummary,
    PlayerSummary,
)

__all__ = [
    "EntryType",
    "Player",
    "LedgerEntry",
    "PositionSummary",
    "PlayerSummary",
]
