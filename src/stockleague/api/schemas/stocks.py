"""Pydantic schemas for market price endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class StockPriceResponse(BaseModel):
    """Current price of one symbol."""

    symbol: str
    price: Decimal


class StockPricesResponse(BaseModel):
    """Current prices keyed by symbol; null where no quote is available."""

    prices: dict[str, Optional[Decimal]]


class PricePointResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: date
    price: Decimal


class StockHistoryResponse(BaseModel):
    """Daily closes of one symbol, oldest first."""

    symbol: str
    history: list[PricePointResponse]
