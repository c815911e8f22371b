"""Valuation service for marking portfolios to market."""

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from stockleague.core.timezone import now_utc, trading_date
from stockleague.domain.models import LedgerEntry, Player, PositionSummary
from stockleague.domain.views import HoldingView, PortfolioSnapshot, PortfolioView
from stockleague.services.ledger_service import LedgerService
from stockleague.services.player_service import PlayerService
from stockleague.services.price_service import PriceService
from stockleague.services.summary_engine import SummaryEngine, replay_player, replay_position

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")
DEFAULT_HISTORY_DAYS = 30


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return ZERO
    return (part / whole * 100).quantize(CENT)


class ValuationService:
    """
    Computes portfolio values and P&L from summaries and current prices.

    Holdings without a price are valued at cost, so an unavailable quote
    shows no unrealized gain or loss rather than a total loss.
    """

    def __init__(
        self,
        player_service: PlayerService,
        summary_engine: SummaryEngine,
        price_service: PriceService,
        ledger_service: LedgerService,
    ):
        self._players = player_service
        self._summaries = summary_engine
        self._prices = price_service
        self._ledger = ledger_service

    def portfolio(self, player_id: str) -> PortfolioView:
        """
        Value one player's portfolio.

        Raises:
            NotFoundError: If the player does not exist
        """
        player = self._players.get_player(player_id)
        return self._value(player)

    def leaderboard(self) -> list[PortfolioView]:
        """All players' portfolios, best total P&L % first."""
        views = [self._value(player) for player in self._players.list_players()]
        return sorted(views, key=lambda v: (v.total_pnl_percent, v.total_pnl), reverse=True)

    def history(self, player_id: str, days: int = DEFAULT_HISTORY_DAYS) -> list[PortfolioSnapshot]:
        """
        Daily portfolio values over the last `days` calendar days.

        The ledger is replayed up to each day with a close for a held symbol,
        and holdings are valued at the latest close on or before that day, or
        at cost when none is known. The last point is today at current prices.
        Days before the player's first entry are left out.

        Raises:
            NotFoundError: If the player does not exist
        """
        self._players.get_player(player_id)
        dated = [(trading_date(e.timestamp), e) for e in self._ledger.entries_for_player(player_id)]
        if not dated:
            return []

        today = trading_date(now_utc())
        start = max(dated[0][0], today - timedelta(days=days))
        symbols = sorted({e.symbol for _, e in dated if e.symbol})
        closes = {
            symbol: {p.date: p.price for p in self._prices.get_historical_prices(symbol, days=days)}
            for symbol in symbols
        }

        snapshot_days = sorted({d for series in closes.values() for d in series if start <= d < today})
        snapshot_days.append(today)

        snapshots = []
        for day in snapshot_days:
            entries = [e for d, e in dated if d <= day]
            if entries:
                snapshots.append(self._snapshot(day, today, entries, closes))
        return snapshots

    def _value(self, player: Player) -> PortfolioView:
        summary = self._summaries.get_player_summary(player.player_id)
        positions = self._summaries.get_position_summaries(player.player_id)

        holdings = [self._holding(p) for p in positions]
        total_position_value = sum((h.current_value for h in holdings), ZERO)
        total_unrealized = sum((h.unrealized_pnl for h in holdings), ZERO)
        total_value = summary.cash_balance + total_position_value
        total_pnl = summary.total_realized_pnl + total_unrealized

        # Today's change: compare with the most recent close before today.
        yesterday_positions = sum((self._yesterday_value(p) for p in positions), ZERO)
        yesterday_value = summary.cash_balance + yesterday_positions
        today_change = total_value - yesterday_value

        return PortfolioView(
            player_id=player.player_id,
            player_name=player.name,
            cash_balance=summary.cash_balance,
            total_deposited=summary.total_deposited,
            total_position_value=total_position_value,
            total_value=total_value,
            total_realized_pnl=summary.total_realized_pnl,
            total_unrealized_pnl=total_unrealized,
            total_pnl=total_pnl,
            total_pnl_percent=_percent(total_pnl, summary.total_deposited),
            today_change=today_change,
            today_change_percent=_percent(today_change, yesterday_value),
            holdings=holdings,
            as_of=now_utc(),
        )

    def _holding(self, position: PositionSummary) -> HoldingView:
        price: Optional[Decimal] = self._prices.get_current_price(position.symbol)
        if price is None:
            logger.info("No price for %s; valuing at cost", position.symbol)
            current_value = position.total_cost_basis
        else:
            current_value = position.quantity * price
        unrealized = current_value - position.total_cost_basis
        return HoldingView(
            symbol=position.symbol,
            quantity=position.quantity,
            average_cost_basis=position.average_cost_basis,
            total_cost_basis=position.total_cost_basis,
            current_price=price,
            current_value=current_value,
            unrealized_pnl=unrealized,
            unrealized_pnl_percent=_percent(unrealized, position.total_cost_basis),
            first_purchase_date=position.first_purchase_date,
            last_activity_date=position.last_activity_date,
        )

    def _snapshot(
        self,
        day: date,
        today: date,
        entries: list[LedgerEntry],
        closes: dict[str, dict[date, Decimal]],
    ) -> PortfolioSnapshot:
        totals = replay_player(entries)
        by_symbol: dict[str, list[LedgerEntry]] = defaultdict(list)
        for entry in entries:
            if entry.symbol:
                by_symbol[entry.symbol].append(entry)

        position_value = ZERO
        for symbol, symbol_entries in by_symbol.items():
            held = replay_position(symbol_entries)
            if held is None:
                continue
            price = self._price_on(symbol, day, today, closes.get(symbol, {}))
            position_value += held.total_cost if price is None else held.quantity * price

        total_value = totals.cash_balance + position_value
        total_pnl = total_value - totals.total_deposited
        return PortfolioSnapshot(
            date=day,
            cash_balance=totals.cash_balance,
            position_value=position_value,
            total_value=total_value,
            total_deposited=totals.total_deposited,
            total_pnl=total_pnl,
            total_pnl_percent=_percent(total_pnl, totals.total_deposited),
        )

    def _price_on(
        self,
        symbol: str,
        day: date,
        today: date,
        series: dict[date, Decimal],
    ) -> Optional[Decimal]:
        if day == today:
            current = self._prices.get_current_price(symbol)
            if current is not None:
                return current
        known = [d for d in series if d <= day]
        return series[max(known)] if known else None

    def _yesterday_value(self, position: PositionSummary) -> Decimal:
        close = self._prices.get_previous_close(position.symbol)
        if close is None:
            return position.total_cost_basis
        return position.quantity * close
