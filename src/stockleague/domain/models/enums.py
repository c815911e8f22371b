"""Enumerations for domain models."""

from enum import Enum


class EntryType(str, Enum):
    """Types of ledger entries."""

    CASH_DEPOSIT = "CASH_DEPOSIT"
    BUY = "BUY"
    SELL = "SELL"


TRADE_TYPES = (EntryType.BUY, EntryType.SELL)
