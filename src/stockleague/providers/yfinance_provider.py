"""
Yahoo Finance price provider via yfinance.

Current price comes from the ticker's fast info (falling back to the latest
daily close); history is daily unadjusted closes.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pandas as pd

from stockleague.domain.views import PricePoint

logger = logging.getLogger(__name__)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_decimal(value) -> Optional[Decimal]:
    if value is None or pd.isna(value):
        return None
    price = Decimal(str(float(value))).quantize(Decimal("0.0001"))
    return price if price > 0 else None


class YFinancePriceProvider:
    """Fetches prices from Yahoo Finance. Errors propagate to the caller."""

    def get_current_price(self, symbol: str) -> Optional[Decimal]:
        yf = _get_yf()
        ticker = yf.Ticker(symbol.upper())

        price = None
        try:
            price = _to_decimal(ticker.fast_info.get("lastPrice"))
        except (KeyError, AttributeError, TypeError) as e:
            logger.debug("fast_info unavailable for %s: %s", symbol, e)
        if price is not None:
            return price

        hist = ticker.history(period="5d", auto_adjust=False)
        if hist is None or hist.empty or "Close" not in hist.columns:
            return None
        closes = hist["Close"].dropna()
        return _to_decimal(closes.iloc[-1]) if not closes.empty else None

    def get_historical_prices(self, symbol: str, since: date) -> list[PricePoint]:
        yf = _get_yf()
        ticker = yf.Ticker(symbol.upper())
        hist = ticker.history(
            start=since,
            end=date.today() + timedelta(days=1),
            auto_adjust=False,
        )
        if hist is None or hist.empty or "Close" not in hist.columns:
            return []

        points: list[PricePoint] = []
        for idx, close in hist["Close"].items():
            price = _to_decimal(close)
            if price is None:
                continue
            dt = idx.date() if hasattr(idx, "date") else idx
            points.append(PricePoint(date=dt, price=price))
        points.sort(key=lambda p: p.date)
        return points
