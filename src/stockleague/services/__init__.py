"""Service layer - business logic orchestration."""

from stockleague.services.ledger_service import LedgerService
from stockleague.services.summary_engine import SummaryEngine, replay_player, replay_position
from stockleague.services.trade_service import TradeResult, TradeService, TradeValidation
from stockleague.services.player_service import PlayerService
from stockleague.services.import_service import ImportRow, ImportService, InitialPosition
from stockleague.services.price_service import PriceService
from stockleague.services.valuation_service import ValuationService

__all__ = [
    "LedgerService",
    "SummaryEngine",
    "replay_player",
    "replay_position",
    "TradeResult",
    "TradeService",
    "TradeValidation",
    "PlayerService",
    "ImportRow",
    "ImportService",
    "InitialPosition",
    "PriceService",
    "ValuationService",
]
