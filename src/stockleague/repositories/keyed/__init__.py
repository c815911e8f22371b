"""Typed repositories layered over a RecordStore."""

from stockleague.repositories.keyed.ledger_repo import KeyedLedgerRepository
from stockleague.repositories.keyed.summary_repo import KeyedSummaryRepository
from stockleague.repositories.keyed.player_repo import KeyedPlayerRepository

__all__ = [
    "KeyedLedgerRepository",
    "KeyedSummaryRepository",
    "KeyedPlayerRepository",
]
