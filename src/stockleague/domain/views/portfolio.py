"""View models for valuation and import outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class PricePoint:
    """Daily closing price of a symbol."""

    date: date
    price: Decimal


@dataclass
class HoldingView:
    """A position enriched with its current market price."""

    symbol: str
    quantity: int
    average_cost_basis: Decimal
    total_cost_basis: Decimal
    current_price: Optional[Decimal] = None
    current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl_percent: Decimal = field(default_factory=lambda: Decimal("0"))
    first_purchase_date: Optional[date] = None
    last_activity_date: Optional[date] = None


@dataclass
class PortfolioView:
    """Valued portfolio of one player."""

    player_id: str
    player_name: str
    cash_balance: Decimal
    total_deposited: Decimal
    total_position_value: Decimal
    total_value: Decimal
    total_realized_pnl: Decimal
    total_unrealized_pnl: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    today_change: Decimal
    today_change_percent: Decimal
    holdings: list[HoldingView] = field(default_factory=list)
    as_of: Optional[datetime] = None


@dataclass
class PortfolioSnapshot:
    """Value of one player's portfolio at the close of one day."""

    date: date
    cash_balance: Decimal
    position_value: Decimal
    total_value: Decimal
    total_deposited: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal


@dataclass
class SkippedRow:
    """Import row that was ignored, with the reason."""

    row_number: int
    reason: str
    player_name: Optional[str] = None


@dataclass
class FailedRow:
    """Import row whose player could not be written, with the error."""

    row_number: int
    player_name: str
    error: str


@dataclass
class CashReport:
    """Initial value breakdown of one imported player."""

    initial_total_value: Decimal
    stock_value: Decimal
    cash: Decimal


@dataclass
class ImportResult:
    """Per-row outcome of a bulk position import."""

    imported_rows: list[int] = field(default_factory=list)
    skipped_rows: list[SkippedRow] = field(default_factory=list)
    failed_rows: list[FailedRow] = field(default_factory=list)
    players: dict[str, str] = field(default_factory=dict)  # name -> player_id
    created_players: list[str] = field(default_factory=list)
    cash_report: dict[str, CashReport] = field(default_factory=dict)
    stale_players: list[str] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.imported_rows)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_rows)

    @property
    def error_count(self) -> int:
        return len(self.failed_rows)
