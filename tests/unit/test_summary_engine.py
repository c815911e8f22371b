"""
Unit tests for SummaryEngine.

Tests cover:
- Full-replay position summaries (average cost, sells, closing out)
- Player summaries (cash, deposited value, realized P&L)
- Replay determinism against the pure replay helpers
- Rebuild, discard and stale self-healing
- Stale marks kept in the store and rebuilds under the player lock
"""

import threading
from datetime import date
from decimal import Decimal

import pytest

from stockleague.core.exceptions import PersistenceError
from stockleague.domain.models import EntryType, PlayerSummary
from stockleague.services import LedgerService, SummaryEngine, replay_player, replay_position

from tests.conftest import eastern_datetime, make_entry


PLAYER = "p1"


def _append(ledger_service: LedgerService, *entries) -> None:
    for entry in entries:
        ledger_service.append(entry)


# =============================================================================
# PURE REPLAY TESTS
# =============================================================================


class TestReplayPosition:
    """Tests for the replay_position helper."""

    def test_average_cost_after_two_buys_and_a_sell(self):
        """
        GIVEN BUY 10 @ 100 then BUY 10 @ 120 then SELL 5
        WHEN I replay the symbol
        THEN 15 shares remain at an unchanged average of 110
        """
        entries = [
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("100"), timestamp=eastern_datetime(2024, 1, 2)),
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("120"), timestamp=eastern_datetime(2024, 1, 3)),
            make_entry(PLAYER, EntryType.SELL, "XYZ", 5, Decimal("150"), timestamp=eastern_datetime(2024, 1, 4)),
        ]

        replay = replay_position(entries)

        assert replay.quantity == 15
        assert replay.average_cost_basis == Decimal("110")
        assert replay.total_cost == Decimal("1650")
        assert replay.first_purchase_date == date(2024, 1, 2)
        assert replay.last_activity_date == date(2024, 1, 4)

    def test_order_independent_of_input_order(self):
        """
        GIVEN the same entries in shuffled order
        WHEN I replay them
        THEN the result matches chronological replay
        """
        buy1 = make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("100"), timestamp=eastern_datetime(2024, 1, 2))
        buy2 = make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("120"), timestamp=eastern_datetime(2024, 1, 3))
        sell = make_entry(PLAYER, EntryType.SELL, "XYZ", 5, Decimal("150"), timestamp=eastern_datetime(2024, 1, 4))

        assert replay_position([sell, buy2, buy1]) == replay_position([buy1, buy2, sell])

    def test_selling_everything_returns_none(self):
        """
        GIVEN a BUY followed by a SELL of all shares
        WHEN I replay the symbol
        THEN no position remains
        """
        entries = [
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("100"), timestamp=eastern_datetime(2024, 1, 2)),
            make_entry(PLAYER, EntryType.SELL, "XYZ", 10, Decimal("90"), timestamp=eastern_datetime(2024, 1, 3)),
        ]

        assert replay_position(entries) is None

    def test_no_entries_returns_none(self):
        assert replay_position([]) is None

    def test_trading_date_uses_eastern_calendar(self):
        """
        GIVEN a BUY at 22:00 Eastern (03:00 UTC the next day)
        WHEN I replay the symbol
        THEN the purchase date is the Eastern calendar date
        """
        entries = [
            make_entry(PLAYER, EntryType.BUY, "XYZ", 1, Decimal("10"), timestamp=eastern_datetime(2024, 3, 1, 22)),
        ]

        replay = replay_position(entries)

        assert replay.first_purchase_date == date(2024, 3, 1)


class TestReplayPlayer:
    """Tests for the replay_player helper."""

    def test_deposit_plus_zero_cash_buy_counts_toward_deposited(self):
        """
        GIVEN a $1000 deposit and an imported BUY of 5 @ 50 with no cash change
        WHEN I replay the player
        THEN deposited is 1250 and cash is 1000
        """
        entries = [
            make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("1000")),
            make_entry(PLAYER, EntryType.BUY, "XYZ", 5, Decimal("50"), cash_change=Decimal("0")),
        ]

        replay = replay_player(entries)

        assert replay.total_deposited == Decimal("1250")
        assert replay.cash_balance == Decimal("1000")
        assert replay.total_realized_pnl == Decimal("0")

    def test_cash_is_sum_of_cash_changes(self):
        """
        GIVEN a deposit, a buy and a sell with realized P&L
        WHEN I replay the player
        THEN cash equals the sum of cash changes and realized P&L is summed
        """
        entries = [
            make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("5000")),
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("100")),
            make_entry(PLAYER, EntryType.SELL, "XYZ", 4, Decimal("125"), realized_pnl=Decimal("100")),
        ]

        replay = replay_player(entries)

        assert replay.cash_balance == sum(e.cash_change for e in entries)
        assert replay.cash_balance == Decimal("4500")
        assert replay.total_deposited == Decimal("5000")
        assert replay.total_realized_pnl == Decimal("100")


# =============================================================================
# RECALCULATION TESTS
# =============================================================================


class TestRecalculate:
    """Tests for persisted recalculation."""

    def test_recalculate_position_persists_summary(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN two BUY entries for a symbol
        WHEN I recalculate the position summary
        THEN it is persisted and readable
        """
        _append(
            ledger_service,
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("100"), timestamp=eastern_datetime(2024, 1, 2)),
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("120"), timestamp=eastern_datetime(2024, 1, 3)),
        )

        summary = summary_engine.recalculate_position_summary(PLAYER, "XYZ")

        assert summary.quantity == 20
        assert summary.average_cost_basis == Decimal("110")
        stored = summary_engine.get_position_summary(PLAYER, "XYZ")
        assert stored.quantity == 20
        assert stored.total_cost_basis == Decimal("2200")

    def test_closed_position_summary_is_deleted(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN a persisted position that is then sold out
        WHEN I recalculate the position summary
        THEN the summary is removed
        """
        _append(
            ledger_service,
            make_entry(PLAYER, EntryType.BUY, "XYZ", 10, Decimal("100"), timestamp=eastern_datetime(2024, 1, 2)),
        )
        summary_engine.recalculate_position_summary(PLAYER, "XYZ")
        _append(
            ledger_service,
            make_entry(PLAYER, EntryType.SELL, "XYZ", 10, Decimal("100"), timestamp=eastern_datetime(2024, 1, 3)),
        )

        assert summary_engine.recalculate_position_summary(PLAYER, "XYZ") is None
        assert summary_engine.get_position_summary(PLAYER, "XYZ") is None

    def test_recalculation_is_idempotent(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN a ledger with deposits and trades
        WHEN I recalculate the player summary twice
        THEN both results carry the same figures
        """
        _append(
            ledger_service,
            make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("3000")),
            make_entry(PLAYER, EntryType.BUY, "AAPL", 3, Decimal("150")),
        )

        first = summary_engine.recalculate_player_summary(PLAYER)
        second = summary_engine.recalculate_player_summary(PLAYER)

        assert (first.cash_balance, first.total_deposited, first.total_realized_pnl) == (
            second.cash_balance,
            second.total_deposited,
            second.total_realized_pnl,
        )
        assert first.cash_balance == Decimal("2550")


# =============================================================================
# REBUILD / DISCARD TESTS
# =============================================================================


class TestRebuild:
    """Tests for whole-player rebuild and discard."""

    def test_rebuild_matches_replay(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN a multi-symbol ledger
        WHEN I rebuild the player
        THEN stored summaries equal a from-scratch replay
        """
        entries = [
            make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("10000"), timestamp=eastern_datetime(2024, 1, 1)),
            make_entry(PLAYER, EntryType.BUY, "AAPL", 10, Decimal("150"), timestamp=eastern_datetime(2024, 1, 2)),
            make_entry(PLAYER, EntryType.BUY, "MSFT", 5, Decimal("400"), timestamp=eastern_datetime(2024, 1, 3)),
            make_entry(PLAYER, EntryType.SELL, "AAPL", 4, Decimal("160"), timestamp=eastern_datetime(2024, 1, 4), realized_pnl=Decimal("40")),
        ]
        _append(ledger_service, *entries)

        summary = summary_engine.rebuild_player(PLAYER)

        expected = replay_player(entries)
        assert summary.cash_balance == expected.cash_balance
        assert summary.total_realized_pnl == Decimal("40")
        positions = {p.symbol: p for p in summary_engine.get_position_summaries(PLAYER)}
        assert set(positions) == {"AAPL", "MSFT"}
        assert positions["AAPL"].quantity == 6
        assert positions["AAPL"].quantity == replay_position([e for e in entries if e.symbol == "AAPL"]).quantity

    def test_rebuild_removes_summaries_for_symbols_gone_from_ledger(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN a stored summary for a symbol whose entries were cleared
        WHEN I rebuild the player
        THEN the orphaned summary is deleted
        """
        _append(ledger_service, make_entry(PLAYER, EntryType.BUY, "XYZ", 1, Decimal("10")))
        summary_engine.rebuild_player(PLAYER)
        ledger_service.clear_player(PLAYER)

        summary_engine.rebuild_player(PLAYER)

        assert summary_engine.get_position_summaries(PLAYER) == []

    def test_discard_player_removes_all_summaries(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        summary_repo,
    ):
        """
        GIVEN a player with summaries
        WHEN I discard the player's summaries
        THEN none remain in storage
        """
        _append(
            ledger_service,
            make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("100")),
            make_entry(PLAYER, EntryType.BUY, "XYZ", 1, Decimal("10")),
        )
        summary_engine.rebuild_player(PLAYER)

        summary_engine.discard_player(PLAYER)

        assert summary_repo.get_positions(PLAYER) == []
        assert summary_repo.get_player_summary(PLAYER) is None


# =============================================================================
# READ SIDE TESTS
# =============================================================================


class TestReads:
    """Tests for summary reads and self-healing."""

    def test_absent_player_reads_as_zero(self, summary_engine: SummaryEngine):
        """
        GIVEN a player with no ledger history
        WHEN I read the player summary
        THEN a zero summary is returned without raising
        """
        summary = summary_engine.get_player_summary("nobody")

        assert summary.cash_balance == Decimal("0")
        assert summary.total_deposited == Decimal("0")

    def test_missing_summary_with_entries_is_recalculated(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN ledger entries but no stored player summary
        WHEN I read the player summary
        THEN it is recalculated from the ledger
        """
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("750")))

        summary = summary_engine.get_player_summary(PLAYER)

        assert summary.cash_balance == Decimal("750")

    def test_stale_player_is_rebuilt_on_read(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
    ):
        """
        GIVEN a player marked stale after a ledger append
        WHEN I read the player summary
        THEN the summaries are rebuilt and the mark is cleared
        """
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("500")))
        summary_engine.rebuild_player(PLAYER)
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("250")))
        summary_engine.mark_stale(PLAYER)

        summary = summary_engine.get_player_summary(PLAYER)

        assert summary.cash_balance == Decimal("750")
        assert not summary_engine.is_stale(PLAYER)

    def test_failed_heal_serves_cached_summary(
        self,
        ledger_service: LedgerService,
        summary_repo,
        monkeypatch,
    ):
        """
        GIVEN a stale player whose rebuild fails
        WHEN I read the player summary
        THEN the cached summary is returned and the player stays stale
        """
        summary_repo.save_player_summary(PlayerSummary(player_id=PLAYER, cash_balance=Decimal("42")))
        engine = SummaryEngine(ledger_service, summary_repo)
        engine.mark_stale(PLAYER)

        def broken(player_id):
            raise PersistenceError("query", "LEDGER", player_id, OSError("disk gone"))

        monkeypatch.setattr(ledger_service, "entries_for_player", broken)

        summary = engine.get_player_summary(PLAYER)

        assert summary.cash_balance == Decimal("42")
        assert engine.is_stale(PLAYER)


# =============================================================================
# LOCKING TESTS
# =============================================================================


class TestHealLocking:
    """Stale rebuilds share the per-player lock with trades and imports."""

    def test_heal_waits_for_player_lock(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        locks,
    ):
        """
        GIVEN a stale player whose lock is held by a writer
        WHEN another thread reads the player summary
        THEN the read waits for the writer before rebuilding
        """
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("500")))
        summary_engine.mark_stale(PLAYER)
        results = []

        with locks.hold(PLAYER):
            reader = threading.Thread(
                target=lambda: results.append(summary_engine.get_player_summary(PLAYER))
            )
            reader.start()
            reader.join(timeout=0.2)
            assert reader.is_alive()
            assert results == []
            _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("250")))

        reader.join(timeout=5)
        assert not reader.is_alive()
        assert results[0].cash_balance == Decimal("750")
        assert not summary_engine.is_stale(PLAYER)

    def test_heal_inside_held_lock(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        locks,
    ):
        """
        GIVEN a stale player
        WHEN the lock holder reads the summary (as a trade does while validating)
        THEN the rebuild runs without deadlocking
        """
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("300")))
        summary_engine.mark_stale(PLAYER)

        with locks.hold(PLAYER):
            summary = summary_engine.get_player_summary(PLAYER)

        assert summary.cash_balance == Decimal("300")
        assert not summary_engine.is_stale(PLAYER)


# =============================================================================
# STALE MARK PERSISTENCE TESTS
# =============================================================================


class TestStaleMarks:
    """Stale marks are kept in the store."""

    def test_mark_is_visible_to_a_new_engine(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        summary_repo,
    ):
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("100")))
        summary_engine.mark_stale(PLAYER)

        restarted = SummaryEngine(ledger_service, summary_repo)

        assert summary_repo.is_stale(PLAYER)
        assert restarted.get_player_summary(PLAYER).cash_balance == Decimal("100")
        assert not summary_repo.is_stale(PLAYER)
        assert not summary_engine.is_stale(PLAYER)

    def test_unsaved_mark_is_kept_in_process(
        self,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        summary_repo,
        monkeypatch,
    ):
        """
        GIVEN the store rejects the stale mark itself
        WHEN the player is marked stale
        THEN this engine still treats the player as stale until a rebuild
        """
        def failing_mark(player_id, marked_at):
            raise PersistenceError("put", "STALE_MARK", player_id, OSError("down"))

        monkeypatch.setattr(summary_repo, "mark_stale", failing_mark)
        _append(ledger_service, make_entry(PLAYER, EntryType.CASH_DEPOSIT, cash_change=Decimal("100")))

        summary_engine.mark_stale(PLAYER)

        assert summary_engine.is_stale(PLAYER)
        assert not summary_repo.is_stale(PLAYER)
        summary_engine.rebuild_player(PLAYER)
        assert not summary_engine.is_stale(PLAYER)
