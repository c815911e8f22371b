"""League context: one wired set of stores and services.

Built from explicit Settings; the HTTP app keeps one on app.state and
scripts or tests can build their own.
"""

from typing import Optional

from stockleague.config.settings import Settings
from stockleague.core.locks import PlayerLocks
from stockleague.providers import PriceProvider, StubPriceProvider, YFinancePriceProvider
from stockleague.repositories import (
    KeyedLedgerRepository,
    KeyedPlayerRepository,
    KeyedSummaryRepository,
    RecordStore,
)
from stockleague.repositories.factory import create_record_store
from stockleague.services import (
    ImportService,
    LedgerService,
    PlayerService,
    PriceService,
    SummaryEngine,
    TradeService,
    ValuationService,
)


def build_price_provider(settings: Settings) -> PriceProvider:
    """Provide the PriceProvider named by settings.price_provider."""
    if settings.price_provider == "stub":
        return StubPriceProvider()
    return YFinancePriceProvider()


class LeagueContext:
    """
    Application context providing in-process access to all services.

    Every service shares the same record store and per-player lock registry,
    so trades and imports for one player are serialized across entry points.
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[RecordStore] = None,
        price_provider: Optional[PriceProvider] = None,
    ):
        self.settings = settings
        self.store = store if store is not None else create_record_store(settings)
        self.locks = PlayerLocks()

        self.player_repo = KeyedPlayerRepository(self.store)
        self.ledger_repo = KeyedLedgerRepository(self.store)
        self.summary_repo = KeyedSummaryRepository(self.store)

        self.players = PlayerService(
            self.player_repo,
            default_password=settings.default_player_password,
        )
        self.ledger = LedgerService(self.ledger_repo)
        self.summaries = SummaryEngine(self.ledger, self.summary_repo, locks=self.locks)
        self.trades = TradeService(
            player_repo=self.player_repo,
            ledger_service=self.ledger,
            summary_engine=self.summaries,
            locks=self.locks,
            single_stock_rule=settings.single_stock_rule,
            cash_symbol=settings.cash_symbol,
        )
        self.imports = ImportService(
            player_service=self.players,
            ledger_service=self.ledger,
            summary_engine=self.summaries,
            locks=self.locks,
            cash_symbol=settings.cash_symbol,
        )
        self.prices = PriceService(
            price_provider if price_provider is not None else build_price_provider(settings),
            ttl_seconds=settings.price_cache_ttl_seconds,
        )
        self.valuation = ValuationService(
            player_service=self.players,
            summary_engine=self.summaries,
            price_service=self.prices,
            ledger_service=self.ledger,
        )

    def rebuild_all(self) -> int:
        """Rebuild summaries for every player; returns the number rebuilt."""
        players = self.players.list_players()
        for player in players:
            self.summaries.rebuild_player(player.player_id)
        return len(players)
