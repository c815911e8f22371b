"""Pydantic schemas for API request/response."""

from stockleague.api.schemas.player import (
    PlayerCreate,
    PasswordChange,
    LoginRequest,
    PlayerResponse,
    PlayerListResponse,
)
from stockleague.api.schemas.portfolio import (
    PositionSummaryResponse,
    PlayerSummaryResponse,
    HoldingResponse,
    PortfolioResponse,
    LeaderboardResponse,
    PortfolioSnapshotResponse,
    PortfolioHistoryResponse,
)
from stockleague.api.schemas.stocks import (
    StockPriceResponse,
    StockPricesResponse,
    PricePointResponse,
    StockHistoryResponse,
)
from stockleague.api.schemas.trade import (
    TradeRequest,
    LedgerEntryResponse,
    TradeResponse,
    LedgerListResponse,
)
from stockleague.api.schemas.imports import ImportResultResponse

__all__ = [
    "PlayerCreate",
    "PasswordChange",
    "LoginRequest",
    "PlayerResponse",
    "PlayerListResponse",
    "PositionSummaryResponse",
    "PlayerSummaryResponse",
    "HoldingResponse",
    "PortfolioResponse",
    "LeaderboardResponse",
    "PortfolioSnapshotResponse",
    "PortfolioHistoryResponse",
    "StockPriceResponse",
    "StockPricesResponse",
    "PricePointResponse",
    "StockHistoryResponse",
    "TradeRequest",
    "LedgerEntryResponse",
    "TradeResponse",
    "LedgerListResponse",
    "ImportResultResponse",
]
