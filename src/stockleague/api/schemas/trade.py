"""Pydantic schemas for trade and ledger endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from stockleague.api.schemas.portfolio import PlayerSummaryResponse, PositionSummaryResponse
from stockleague.domain.models import EntryType


class TradeRequest(BaseModel):
    """Request schema for placing a trade."""

    symbol: str = Field(..., min_length=1, max_length=16)
    trade_type: Literal["BUY", "SELL"]
    quantity: int = Field(..., gt=0, description="Whole number of shares")
    price: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Execution price; looked up from the market when omitted",
    )
    notes: Optional[str] = None


class LedgerEntryResponse(BaseModel):
    """Response schema for a single ledger entry."""

    model_config = {"from_attributes": True}

    entry_id: str
    player_id: str
    entry_type: EntryType
    timestamp: datetime
    symbol: Optional[str] = None
    quantity: int
    price_per_share: Decimal
    cash_change: Decimal
    cost_basis_per_share: Optional[Decimal] = None
    realized_pnl: Optional[Decimal] = None
    notes: Optional[str] = None


class TradeResponse(BaseModel):
    """Response schema for an executed trade."""

    success: bool
    entry: Optional[LedgerEntryResponse] = None
    player_summary: Optional[PlayerSummaryResponse] = None
    position_summary: Optional[PositionSummaryResponse] = None
    summaries_stale: bool = False


class LedgerListResponse(BaseModel):
    """Response schema for a player's ledger history."""

    entries: list[LedgerEntryResponse]
    count: int
