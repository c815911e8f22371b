"""Repository layer - data access abstractions and implementations."""

from stockleague.repositories.protocols import (
    Partition,
    RecordStore,
    LedgerRepository,
    SummaryRepository,
    PlayerRepository,
)
from stockleague.repositories.keyed import (
    KeyedLedgerRepository,
    KeyedSummaryRepository,
    KeyedPlayerRepository,
)

__all__ = [
    "Partition",
    "RecordStore",
    "LedgerRepository",
    "SummaryRepository",
    "PlayerRepository",
    "KeyedLedgerRepository",
    "KeyedSummaryRepository",
    "KeyedPlayerRepository",
]
