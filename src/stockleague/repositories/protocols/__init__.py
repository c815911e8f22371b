"""Repository protocol definitions (interfaces)."""

from stockleague.repositories.protocols.record_store import Partition, Record, RecordStore
from stockleague.repositories.protocols.ledger_repo import LedgerRepository
from stockleague.repositories.protocols.summary_repo import SummaryRepository
from stockleague.repositories.protocols.player_repo import PlayerRepository

__all__ = [
    "Partition",
    "Record",
    "RecordStore",
    "LedgerRepository",
    "SummaryRepository",
    "PlayerRepository",
]
