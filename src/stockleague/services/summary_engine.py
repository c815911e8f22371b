"""Summary engine for deriving positions, cash and P&L from the ledger."""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from stockleague.core.exceptions import AppError
from stockleague.core.locks import PlayerLocks
from stockleague.core.timezone import now_utc, trading_date
from stockleague.domain.models import (
    EntryType,
    LedgerEntry,
    PlayerSummary,
    PositionSummary,
)
from stockleague.repositories.protocols import SummaryRepository
from stockleague.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class PositionReplay:
    """Holding state after replaying one symbol's entries."""

    quantity: int
    total_cost: Decimal
    first_purchase_date: Optional[date]
    last_activity_date: Optional[date]

    @property
    def average_cost_basis(self) -> Decimal:
        return self.total_cost / self.quantity


@dataclass
class PlayerReplay:
    """Cash and P&L totals after replaying all of a player's entries."""

    cash_balance: Decimal
    total_deposited: Decimal
    total_realized_pnl: Decimal


def replay_position(entries: Iterable[LedgerEntry]) -> Optional[PositionReplay]:
    """
    Replay BUY/SELL entries of one symbol in timestamp order.

    Sells remove cost at the running average cost per share, so the average
    of the shares still held is unchanged by a sell. Returns None when no
    shares remain.
    """
    total_shares = 0
    total_cost = ZERO
    first_purchase: Optional[date] = None
    last_activity: Optional[date] = None

    for entry in sorted(entries, key=lambda e: (e.timestamp, e.entry_id)):
        if entry.entry_type == EntryType.BUY:
            total_cost += entry.shares * entry.price_per_share
            total_shares += entry.shares
            if first_purchase is None:
                first_purchase = trading_date(entry.timestamp)
        elif entry.entry_type == EntryType.SELL:
            sold = entry.shares
            avg_cost = total_cost / total_shares if total_shares > 0 else ZERO
            total_cost -= avg_cost * sold
            total_shares -= sold
        else:
            continue
        last_activity = trading_date(entry.timestamp)

    if total_shares <= 0:
        return None
    return PositionReplay(
        quantity=total_shares,
        total_cost=total_cost,
        first_purchase_date=first_purchase,
        last_activity_date=last_activity,
    )


def replay_player(entries: Iterable[LedgerEntry]) -> PlayerReplay:
    """
    Sum a player's entries.

    Deposited value includes the notional of zero-cash BUY entries (imported
    holdings) alongside cash deposits.
    """
    cash_balance = ZERO
    total_deposited = ZERO
    total_realized = ZERO

    for entry in entries:
        cash_balance += entry.cash_change
        if entry.entry_type == EntryType.CASH_DEPOSIT:
            total_deposited += entry.cash_change
        elif entry.is_initial_position:
            total_deposited += entry.notional
        if entry.realized_pnl is not None:
            total_realized += entry.realized_pnl

    return PlayerReplay(
        cash_balance=cash_balance,
        total_deposited=total_deposited,
        total_realized_pnl=total_realized,
    )


class SummaryEngine:
    """
    Engine for computing summaries from the ledger.

    Every recalculation is a full replay from scratch, so it can be repeated
    at any time and always converges on what the ledger says. Summaries are
    never edited directly; this class is their only writer.

    Stale marks live in the store so that a restarted process still heals a
    player whose recompute failed. Rebuilds take the player's lock, the same
    one trades and imports hold.
    """

    def __init__(
        self,
        ledger_service: LedgerService,
        summary_repo: SummaryRepository,
        locks: Optional[PlayerLocks] = None,
    ):
        self._ledger = ledger_service
        self._summary_repo = summary_repo
        self._locks = locks if locks is not None else PlayerLocks()
        # Marks whose store write failed; kept until the next successful rebuild.
        self._unsaved_stale: set[str] = set()
        self._stale_lock = threading.Lock()

    # Recalculation

    def recalculate_position_summary(
        self,
        player_id: str,
        symbol: str,
    ) -> Optional[PositionSummary]:
        """
        Replay one symbol and persist its summary.

        Deletes the summary and returns None when the player holds no shares.
        """
        entries = self._ledger.entries_for_symbol(player_id, symbol)
        return self._store_position(player_id, symbol, entries)

    def recalculate_player_summary(self, player_id: str) -> PlayerSummary:
        """Replay all of a player's entries and persist the totals."""
        entries = self._ledger.entries_for_player(player_id)
        return self._store_player(player_id, entries)

    def rebuild_player(self, player_id: str) -> PlayerSummary:
        """
        Recalculate every summary of a player.

        Covers each symbol in the ledger plus any summary left for a symbol
        that no longer appears there. Clears the stale mark on success.
        Runs under the player's lock.
        """
        with self._locks.hold(player_id):
            entries = self._ledger.entries_for_player(player_id)

            by_symbol: dict[str, list[LedgerEntry]] = defaultdict(list)
            for entry in entries:
                if entry.symbol:
                    by_symbol[entry.symbol].append(entry)
            for existing in self._summary_repo.get_positions(player_id):
                by_symbol.setdefault(existing.symbol, [])

            for symbol, symbol_entries in by_symbol.items():
                self._store_position(player_id, symbol, symbol_entries)
            summary = self._store_player(player_id, entries)

            self._summary_repo.clear_stale(player_id)
            with self._stale_lock:
                self._unsaved_stale.discard(player_id)

        logger.info("Rebuilt summaries for player %s (%d entries)", player_id, len(entries))
        return summary

    def discard_player(self, player_id: str) -> None:
        """Delete all summaries of a player (paired with a ledger reset)."""
        for position in self._summary_repo.get_positions(player_id):
            self._summary_repo.delete_position(player_id, position.symbol)
        self._summary_repo.delete_player_summary(player_id)

    # Staleness

    def mark_stale(self, player_id: str) -> None:
        """
        Flag a player whose summaries may lag the ledger.

        The mark is written to the store. When that write fails too, this
        process remembers the mark until a rebuild succeeds.
        """
        try:
            self._summary_repo.mark_stale(player_id, now_utc())
        except AppError as e:
            logger.error("Could not store stale mark for player %s: %s", player_id, e)
            with self._stale_lock:
                self._unsaved_stale.add(player_id)

    def is_stale(self, player_id: str) -> bool:
        with self._stale_lock:
            if player_id in self._unsaved_stale:
                return True
        return self._summary_repo.is_stale(player_id)

    # Reads

    def get_player_summary(self, player_id: str) -> PlayerSummary:
        """
        Return the cached player summary.

        A stale player is rebuilt first; a missing summary for a player with
        ledger history is recalculated; a player with no history reads as zero.
        """
        if self._heal_if_stale(player_id):
            cached = self._summary_repo.get_player_summary(player_id)
            if cached:
                return cached

        cached = self._summary_repo.get_player_summary(player_id)
        if cached:
            return cached
        if self._ledger.entries_for_player(player_id):
            logger.info("Player summary missing for %s; recalculating", player_id)
            return self.recalculate_player_summary(player_id)
        return PlayerSummary.empty(player_id)

    def get_position_summary(self, player_id: str, symbol: str) -> Optional[PositionSummary]:
        """Return the cached position summary, or None when nothing is held."""
        self._heal_if_stale(player_id)
        return self._summary_repo.get_position(player_id, symbol)

    def get_position_summaries(self, player_id: str) -> list[PositionSummary]:
        """Return all cached position summaries of a player."""
        self._heal_if_stale(player_id)
        return self._summary_repo.get_positions(player_id)

    # Internals

    def _heal_if_stale(self, player_id: str) -> bool:
        if not self.is_stale(player_id):
            return False
        with self._locks.hold(player_id):
            # Another thread may have rebuilt while this one waited.
            if not self.is_stale(player_id):
                return True
            try:
                self.rebuild_player(player_id)
            except AppError as e:
                logger.warning("Summary rebuild for %s failed, serving cached data: %s", player_id, e)
                return False
        return True

    def _store_position(
        self,
        player_id: str,
        symbol: str,
        entries: list[LedgerEntry],
    ) -> Optional[PositionSummary]:
        replay = replay_position(entries)
        if replay is None:
            self._summary_repo.delete_position(player_id, symbol)
            return None

        summary = PositionSummary(
            player_id=player_id,
            symbol=symbol,
            quantity=replay.quantity,
            average_cost_basis=replay.average_cost_basis,
            total_cost_basis=replay.total_cost,
            first_purchase_date=replay.first_purchase_date,
            last_activity_date=replay.last_activity_date,
            last_updated=now_utc(),
        )
        return self._summary_repo.save_position(summary)

    def _store_player(self, player_id: str, entries: list[LedgerEntry]) -> PlayerSummary:
        replay = replay_player(entries)
        summary = PlayerSummary(
            player_id=player_id,
            cash_balance=replay.cash_balance,
            total_deposited=replay.total_deposited,
            total_realized_pnl=replay.total_realized_pnl,
            last_updated=now_utc(),
        )
        return self._summary_repo.save_player_summary(summary)
