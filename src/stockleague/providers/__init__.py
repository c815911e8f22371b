"""Market price providers."""

from stockleague.providers.price_provider import PriceProvider
from stockleague.providers.stub_provider import StubPriceProvider
from stockleague.providers.yfinance_provider import YFinancePriceProvider

__all__ = [
    "PriceProvider",
    "StubPriceProvider",
    "YFinancePriceProvider",
]
