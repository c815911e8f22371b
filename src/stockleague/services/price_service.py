"""
Price service: cached market prices for valuation and trade entry.
In-memory cache per symbol with TTL; degrades gracefully on provider failure.
"""

import logging
import threading
import time
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Optional

from stockleague.core.timezone import now_utc, trading_date
from stockleague.domain.views import PricePoint
from stockleague.providers.price_provider import PriceProvider

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
HISTORY_LOOKBACK_DAYS = 10


class PriceService:
    """
    Wraps a PriceProvider with caching.

    On provider failure the last cached value is returned even if expired,
    or None when nothing was ever fetched.
    """

    def __init__(
        self,
        provider: PriceProvider,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._provider = provider
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # symbol -> (price, cached_at)
        self._prices: dict[str, tuple[Optional[Decimal], float]] = {}
        # symbol -> (previous close, cached_at)
        self._prev_closes: dict[str, tuple[Optional[Decimal], float]] = {}

    def get_current_price(self, symbol: str) -> Optional[Decimal]:
        """Latest price for a symbol, or None if unavailable."""
        key = (symbol or "").strip().upper()
        if not key:
            return None
        return self._cached(self._prices, key, lambda: self._provider.get_current_price(key))

    def get_prices(self, symbols: list[str]) -> dict[str, Optional[Decimal]]:
        """Latest prices keyed by upper-cased symbol."""
        return {s.strip().upper(): self.get_current_price(s) for s in symbols if (s or "").strip()}

    def get_previous_close(self, symbol: str) -> Optional[Decimal]:
        """Most recent daily close strictly before today's trading date."""
        key = (symbol or "").strip().upper()
        if not key:
            return None
        return self._cached(self._prev_closes, key, lambda: self._fetch_previous_close(key))

    def get_historical_prices(self, symbol: str, days: int = 30) -> list[PricePoint]:
        """Daily closes over the last `days` calendar days; empty on failure."""
        since = trading_date(now_utc()) - timedelta(days=days)
        try:
            return self._provider.get_historical_prices(symbol.strip().upper(), since)
        except Exception as e:
            logger.warning("History lookup for %s failed: %s", symbol, e)
            return []

    def clear_cache(self) -> None:
        with self._lock:
            self._prices.clear()
            self._prev_closes.clear()

    def _fetch_previous_close(self, symbol: str) -> Optional[Decimal]:
        today = trading_date(now_utc())
        points = self._provider.get_historical_prices(
            symbol, today - timedelta(days=HISTORY_LOOKBACK_DAYS)
        )
        before_today = [p for p in points if p.date < today]
        return before_today[-1].price if before_today else None

    def _cached(
        self,
        cache: dict[str, tuple[Optional[Decimal], float]],
        key: str,
        fetch: Callable[[], Optional[Decimal]],
    ) -> Optional[Decimal]:
        now = self._clock()
        with self._lock:
            hit = cache.get(key)
        if hit and now - hit[1] <= self._ttl:
            return hit[0]

        try:
            value = fetch()
        except Exception as e:
            logger.warning("Price lookup for %s failed, using cached value: %s", key, e)
            return hit[0] if hit else None

        with self._lock:
            cache[key] = (value, self._clock())
        return value
