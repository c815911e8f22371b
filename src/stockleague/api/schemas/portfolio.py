"""Pydantic schemas for summary and valuation endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PositionSummaryResponse(BaseModel):
    """Response schema for a cached position summary."""

    model_config = {"from_attributes": True}

    symbol: str
    quantity: int
    average_cost_basis: Decimal
    total_cost_basis: Decimal
    first_purchase_date: Optional[date] = None
    last_activity_date: Optional[date] = None


class PlayerSummaryResponse(BaseModel):
    """Response schema for a cached player summary."""

    model_config = {"from_attributes": True}

    player_id: str
    cash_balance: Decimal
    total_deposited: Decimal
    total_realized_pnl: Decimal
    last_updated: Optional[datetime] = None


class HoldingResponse(BaseModel):
    """Response schema for a holding marked to market."""

    model_config = {"from_attributes": True}

    symbol: str
    quantity: int
    average_cost_basis: Decimal
    total_cost_basis: Decimal
    current_price: Optional[Decimal] = None
    current_value: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal
    first_purchase_date: Optional[date] = None
    last_activity_date: Optional[date] = None


class PortfolioResponse(BaseModel):
    """Response schema for a valued portfolio."""

    model_config = {"from_attributes": True}

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
    holdings: list[HoldingResponse]
    as_of: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    """Response schema for the league standings."""

    portfolios: list[PortfolioResponse]
    count: int


class PortfolioSnapshotResponse(BaseModel):
    """Response schema for one day of a portfolio's value history."""

    model_config = {"from_attributes": True}

    date: date
    cash_balance: Decimal
    position_value: Decimal
    total_value: Decimal
    total_deposited: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal


class PortfolioHistoryResponse(BaseModel):
    """Response schema for a portfolio's daily values, oldest first."""

    player_id: str
    snapshots: list[PortfolioSnapshotResponse]
