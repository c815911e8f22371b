"""API routers package."""

from stockleague.api.routers.players import router as players_router
from stockleague.api.routers.trades import router as trades_router
from stockleague.api.routers.portfolio import router as portfolio_router
from stockleague.api.routers.imports import router as imports_router
from stockleague.api.routers.stocks import router as stocks_router

__all__ = [
    "players_router",
    "trades_router",
    "portfolio_router",
    "imports_router",
    "stocks_router",
]
