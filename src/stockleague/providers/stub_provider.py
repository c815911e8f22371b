"""Stub price provider for offline/testing use."""

import hashlib
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from stockleague.core.timezone import now_utc, trading_date
from stockleague.domain.views import PricePoint


# Deterministic fake prices for common symbols: (last, previous close)
_STUB_PRICES: dict[str, tuple[Decimal, Decimal]] = {
    "AAPL": (Decimal("185.50"), Decimal("184.25")),
    "GOOGL": (Decimal("142.75"), Decimal("141.50")),
    "MSFT": (Decimal("378.25"), Decimal("376.80")),
    "AMZN": (Decimal("178.50"), Decimal("177.25")),
    "TSLA": (Decimal("248.75"), Decimal("250.10")),
    "NVDA": (Decimal("485.25"), Decimal("482.50")),
    "META": (Decimal("505.50"), Decimal("502.75")),
    "SPY": (Decimal("485.25"), Decimal("484.10")),
    "QQQ": (Decimal("418.75"), Decimal("417.50")),
    "VTI": (Decimal("252.30"), Decimal("251.80")),
}


def _symbol_seed(symbol: str) -> int:
    return int(hashlib.sha256(symbol.encode("utf-8")).hexdigest()[:8], 16)


class StubPriceProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Known symbols use predefined prices; unknown symbols get a price derived
    from a hash of the symbol, so repeated runs agree. Explicit `prices`
    override both.
    """

    def __init__(self, prices: Optional[dict[str, Decimal]] = None):
        self._overrides = {k.upper(): Decimal(str(v)) for k, v in (prices or {}).items()}

    def set_price(self, symbol: str, price: Decimal) -> None:
        self._overrides[symbol.upper()] = Decimal(str(price))

    def get_current_price(self, symbol: str) -> Optional[Decimal]:
        return self._quote(symbol)[0]

    def get_historical_prices(self, symbol: str, since: date) -> list[PricePoint]:
        """
        Return one point per weekday from `since` up to yesterday.

        Yesterday closes at the previous-close price; earlier days drift
        deterministically around it.
        """
        last, prev_close = self._quote(symbol)
        today = trading_date(now_utc())
        points: list[PricePoint] = []
        day = since
        seed = _symbol_seed(symbol.upper())
        while day < today:
            if day.weekday() < 5:
                offset = Decimal((seed + day.toordinal()) % 200 - 100) / Decimal("10000")
                price = prev_close if day == today - timedelta(days=1) else prev_close * (1 + offset)
                points.append(PricePoint(date=day, price=price.quantize(Decimal("0.01"))))
            day += timedelta(days=1)
        return points

    def _quote(self, symbol: str) -> tuple[Decimal, Decimal]:
        upper_symbol = symbol.upper()
        if upper_symbol in self._overrides:
            price = self._overrides[upper_symbol]
            return price, price
        if upper_symbol in _STUB_PRICES:
            return _STUB_PRICES[upper_symbol]

        seed = _symbol_seed(upper_symbol)
        last_price = (Decimal(50) + Decimal(seed % 20000) / 100).quantize(Decimal("0.01"))
        change_pct = Decimal((seed // 20000) % 400 - 200) / Decimal("10000")
        prev_close = (last_price / (1 + change_pct)).quantize(Decimal("0.01"))
        return last_price, prev_close
