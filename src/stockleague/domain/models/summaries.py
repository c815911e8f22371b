"""Summary models for derived ledger state."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class PositionSummary:
    """
    Derived holding per player/symbol.

    IMPORTANT: Never edit directly; always recalculated from the ledger.
    A summary only exists while quantity > 0.
    """

    player_id: str
    symbol: str
    quantity: int
    average_cost_basis: Decimal
    total_cost_basis: Decimal
    first_purchase_date: Optional[date] = None
    last_activity_date: Optional[date] = None
    last_updated: Optional[datetime] = field(default=None)


@dataclass
class PlayerSummary:
    """
    Derived cash and P&L totals per player.

    IMPORTANT: Never edit directly; always recalculated from the ledger.
    """

    player_id: str
    cash_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    total_deposited: Decimal = field(default_factory=lambda: Decimal("0"))
    total_realized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    last_updated: Optional[datetime] = field(default=None)

    @classmethod
    def empty(cls, player_id: str) -> "PlayerSummary":
        """Zero summary for a player with no ledger history."""
        return cls(player_id=player_id)
