"""Domain models package."""

from stockleague.domain.models.enums import EntryType, TRADE_TYPES
from stockleague.domain.models.player import Player
from stockleague.domain.models.ledger_entry import LedgerEntry
from stockleague.domain.models.summaries import PositionSummary, PlayerSummary

__all__ = [
    "EntryType",
    "TRADE_TYPES",
    "Player",
    "LedgerEntry",
    "PositionSummary",
    "PlayerSummary",
]
