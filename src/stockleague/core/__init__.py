"""Core utilities and shared functionality."""

from stockleague.core.timezone import (
    now_utc,
    to_utc,
    format_instant,
    parse_instant,
    parse_datetime_eastern,
    trading_date,
    EASTERN_TZ,
)
from stockleague.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientSharesError,
    InsufficientCashError,
    TradePolicyError,
    AuthenticationError,
    PersistenceError,
)
from stockleague.core.locks import PlayerLocks

__all__ = [
    "now_utc",
    "to_utc",
    "format_instant",
    "parse_instant",
    "parse_datetime_eastern",
    "trading_date",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientSharesError",
    "InsufficientCashError",
    "TradePolicyError",
    "AuthenticationError",
    "PersistenceError",
    "PlayerLocks",
]
