"""View models for service outputs."""

from stockleague.domain.views.portfolio import (
    PricePoint,
    HoldingView,
    PortfolioView,
    PortfolioSnapshot,
    SkippedRow,
    FailedRow,
    CashReport,
    ImportResult,
)

__all__ = [
    "PricePoint",
    "HoldingView",
    "PortfolioView",
    "PortfolioSnapshot",
    "SkippedRow",
    "FailedRow",
    "CashReport",
    "ImportResult",
]
