"""Ledger entry domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from stockleague.domain.models.enums import EntryType


@dataclass(frozen=True)
class LedgerEntry:
    """
    Immutable record of one financial event (source of truth).

    - CASH_DEPOSIT: no symbol, quantity 0, price 0, positive cash_change
    - BUY: positive quantity, negative cash_change (zero for imported holdings)
    - SELL: negative quantity, positive cash_change, carries the average cost
      basis in effect and the realized P&L
    """

    entry_id: str
    player_id: str
    entry_type: EntryType
    timestamp: datetime
    symbol: Optional[str] = None
    quantity: int = 0
    price_per_share: Decimal = field(default_factory=lambda: Decimal("0"))
    cash_change: Decimal = field(default_factory=lambda: Decimal("0"))
    cost_basis_per_share: Optional[Decimal] = None
    realized_pnl: Optional[Decimal] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.entry_type, str):
            object.__setattr__(self, "entry_type", EntryType(self.entry_type))

    @property
    def is_trade(self) -> bool:
        """Return True if this is a BUY or SELL entry."""
        return self.entry_type in (EntryType.BUY, EntryType.SELL)

    @property
    def is_initial_position(self) -> bool:
        """
        Return True for a BUY that moved no tracked cash.

        These come from the bulk import and represent value brought into the
        league rather than a purchase.
        """
        return self.entry_type == EntryType.BUY and self.cash_change == 0

    @property
    def shares(self) -> int:
        """Unsigned share count."""
        return abs(self.quantity)

    @property
    def notional(self) -> Decimal:
        """Shares times execution price."""
        return self.shares * self.price_per_share
