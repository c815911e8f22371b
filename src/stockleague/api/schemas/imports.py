"""Pydantic schemas for the position upload endpoint."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class SkippedRowResponse(BaseModel):
    model_config = {"from_attributes": True}

    row_number: int
    reason: str
    player_name: Optional[str] = None


class FailedRowResponse(BaseModel):
    model_config = {"from_attributes": True}

    row_number: int
    player_name: str
    error: str


class CashReportResponse(BaseModel):
    model_config = {"from_attributes": True}

    initial_total_value: Decimal
    stock_value: Decimal
    cash: Decimal


class ImportResultResponse(BaseModel):
    """Response schema for a bulk position import."""

    imported_count: int
    skipped_count: int
    error_count: int
    players: dict[str, str]
    created_players: list[str]
    skipped_rows: list[SkippedRowResponse]
    failed_rows: list[FailedRowResponse]
    cash_report: dict[str, CashReportResponse]
    stale_players: list[str] = []
