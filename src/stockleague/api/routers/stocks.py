"""Market price endpoints."""

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query

from stockleague.api.deps import get_price_service
from stockleague.api.schemas import (
    PricePointResponse,
    StockHistoryResponse,
    StockPriceResponse,
    StockPricesResponse,
)
from stockleague.core.exceptions import NotFoundError, ValidationError
from stockleague.services import PriceService

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=Union[StockPriceResponse, StockPricesResponse])
def get_stock_prices(
    symbol: Optional[str] = Query(None, description="One symbol to quote"),
    symbols: Optional[str] = Query(None, description="Comma-separated symbols to quote"),
    prices: PriceService = Depends(get_price_service),
):
    """
    Quote one symbol or several.

    A single symbol without a quote is 404; in a list it maps to null.
    """
    if symbol and symbol.strip():
        key = symbol.strip().upper()
        price = prices.get_current_price(key)
        if price is None:
            raise NotFoundError("Price", key)
        return StockPriceResponse(symbol=key, price=price)
    if symbols:
        requested = [s for s in symbols.split(",") if s.strip()]
        if requested:
            return StockPricesResponse(prices=prices.get_prices(requested))
    raise ValidationError("Symbol or symbols parameter required")


@router.get("/{symbol}/history", response_model=StockHistoryResponse)
def get_stock_history(
    symbol: str,
    days: int = Query(30, ge=1, le=365, description="Calendar days to look back"),
    prices: PriceService = Depends(get_price_service),
):
    """Daily closes of a symbol, oldest first; empty when none are available."""
    key = symbol.strip().upper()
    points = prices.get_historical_prices(key, days=days)
    return StockHistoryResponse(
        symbol=key,
        history=[PricePointResponse.model_validate(p) for p in points],
    )
