"""Price provider protocol."""

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from stockleague.domain.views import PricePoint


class PriceProvider(Protocol):
    """
    Protocol for market price sources.

    Implementations may raise on network or upstream failures; PriceService
    is responsible for caching and graceful degradation.
    """

    def get_current_price(self, symbol: str) -> Optional[Decimal]:
        """Return the latest price for a symbol, or None if unknown."""
        ...

    def get_historical_prices(self, symbol: str, since: date) -> list[PricePoint]:
        """Return daily closes from `since` up to today, oldest first."""
        ...
