"""Portfolio valuation, standings and summary maintenance endpoints."""

from fastapi import APIRouter, Depends, Query

from stockleague.api.deps import get_context, get_valuation_service
from stockleague.api.schemas import (
    LeaderboardResponse,
    PlayerSummaryResponse,
    PortfolioHistoryResponse,
    PortfolioResponse,
    PortfolioSnapshotResponse,
)
from stockleague.app_context import LeagueContext
from stockleague.services import ValuationService

router = APIRouter(tags=["portfolio"])


@router.get("/players/{player_id}/portfolio", response_model=PortfolioResponse)
def get_portfolio(
    player_id: str,
    valuation: ValuationService = Depends(get_valuation_service),
):
    """Value a player's holdings at current prices."""
    return valuation.portfolio(player_id)


@router.get("/players/{player_id}/portfolio/history", response_model=PortfolioHistoryResponse)
def get_portfolio_history(
    player_id: str,
    days: int = Query(30, ge=1, le=365, description="Calendar days to look back"),
    valuation: ValuationService = Depends(get_valuation_service),
):
    """Daily portfolio values, oldest first, ending with today at current prices."""
    snapshots = valuation.history(player_id, days=days)
    return PortfolioHistoryResponse(
        player_id=player_id,
        snapshots=[PortfolioSnapshotResponse.model_validate(s) for s in snapshots],
    )


@router.post("/players/{player_id}/rebuild", response_model=PlayerSummaryResponse)
def rebuild_summaries(
    player_id: str,
    ctx: LeagueContext = Depends(get_context),
):
    """Recalculate a player's summaries from the ledger."""
    ctx.players.get_player(player_id)
    return ctx.summaries.rebuild_player(player_id)


@router.get("/leaderboard", response_model=LeaderboardResponse)
def leaderboard(valuation: ValuationService = Depends(get_valuation_service)):
    """All players' portfolios, best total P&L % first."""
    views = valuation.leaderboard()
    return LeaderboardResponse(
        portfolios=[PortfolioResponse.model_validate(v) for v in views],
        count=len(views),
    )
