"""Trade execution and ledger history endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from stockleague.api.deps import (
    get_ledger_service,
    get_player_service,
    get_price_service,
    get_trade_service,
)
from stockleague.api.schemas import (
    LedgerEntryResponse,
    LedgerListResponse,
    PlayerSummaryResponse,
    PositionSummaryResponse,
    TradeRequest,
    TradeResponse,
)
from stockleague.core.exceptions import ValidationError
from stockleague.domain.models import EntryType
from stockleague.services import LedgerService, PlayerService, PriceService, TradeService

router = APIRouter(prefix="/players/{player_id}", tags=["trades"])


def _or_none(schema, value):
    return schema.model_validate(value) if value is not None else None


@router.post("/trades", response_model=TradeResponse, status_code=201)
def place_trade(
    player_id: str,
    data: TradeRequest,
    players: PlayerService = Depends(get_player_service),
    trades: TradeService = Depends(get_trade_service),
    prices: PriceService = Depends(get_price_service),
):
    """
    Place a BUY or SELL order.

    Without an explicit price the current market price is used. A rejected
    order returns 400 with the reason and records nothing.
    """
    players.get_player(player_id)

    price = data.price
    if price is None:
        price = prices.get_current_price(data.symbol)
        if price is None:
            raise ValidationError(f"Unable to fetch current price for {data.symbol.upper()}")

    result = trades.execute_trade(
        player_id, data.symbol, data.trade_type, data.quantity, price, notes=data.notes
    )
    if not result.success:
        return JSONResponse(
            status_code=400,
            content={"error": result.error_code, "message": result.error},
        )
    return TradeResponse(
        success=True,
        entry=LedgerEntryResponse.model_validate(result.entry),
        player_summary=_or_none(PlayerSummaryResponse, result.player_summary),
        position_summary=_or_none(PositionSummaryResponse, result.position_summary),
        summaries_stale=result.summaries_stale,
    )


@router.get("/ledger", response_model=LedgerListResponse)
def list_ledger(
    player_id: str,
    entry_type: Optional[list[EntryType]] = Query(None, description="Filter by entry type"),
    limit: Optional[int] = Query(None, ge=1, description="Newest entries to return"),
    players: PlayerService = Depends(get_player_service),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """List a player's ledger entries, newest first (trades only by default)."""
    players.get_player(player_id)
    entries = ledger.query_entries(player_id=player_id, entry_types=entry_type)
    if limit:
        entries = entries[:limit]
    return LedgerListResponse(
        entries=[LedgerEntryResponse.model_validate(e) for e in entries],
        count=len(entries),
    )
