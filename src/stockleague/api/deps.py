"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from stockleague.app_context import LeagueContext
from stockleague.services import (
    LedgerService,
    PlayerService,
    PriceService,
    TradeService,
    ValuationService,
)


def get_context(request: Request) -> LeagueContext:
    """Provide the LeagueContext built at startup."""
    return request.app.state.context


def get_player_service(ctx: LeagueContext = Depends(get_context)) -> PlayerService:
    """Provide PlayerService instance."""
    return ctx.players


def get_ledger_service(ctx: LeagueContext = Depends(get_context)) -> LedgerService:
    """Provide LedgerService instance."""
    return ctx.ledger


def get_trade_service(ctx: LeagueContext = Depends(get_context)) -> TradeService:
    """Provide TradeService instance."""
    return ctx.trades


def get_price_service(ctx: LeagueContext = Depends(get_context)) -> PriceService:
    """Provide PriceService instance."""
    return ctx.prices


def get_valuation_service(ctx: LeagueContext = Depends(get_context)) -> ValuationService:
    """Provide ValuationService instance."""
    return ctx.valuation
