"""Import service: loads players' starting cash and holdings into the ledger."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from stockleague.core.exceptions import AppError
from stockleague.core.locks import PlayerLocks
from stockleague.core.timezone import now_utc
from stockleague.domain.views import CashReport, FailedRow, ImportResult, SkippedRow
from stockleague.services.ledger_service import LedgerService
from stockleague.services.player_service import PlayerService
from stockleague.services.summary_engine import SummaryEngine

logger = logging.getLogger(__name__)


@dataclass
class ImportRow:
    """One parsed row of a positions upload."""

    row_number: int
    player_name: str
    symbol: str
    quantity: Decimal
    price: Decimal
    purchased_at: Optional[datetime] = None


@dataclass
class InitialPosition:
    """A starting holding to record as a zero-cash BUY."""

    symbol: str
    quantity: int
    price: Decimal
    purchased_at: datetime


@dataclass
class _PlayerBatch:
    name: str
    cash: Decimal
    positions: list[InitialPosition]
    row_numbers: list[int]


class ImportService:
    """
    Service for bulk-loading starting positions.

    Import replaces a player's whole ledger: re-importing the same rows
    leaves the player exactly as a first import would.
    """

    def __init__(
        self,
        player_service: PlayerService,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        locks: PlayerLocks,
        cash_symbol: str = "$CASH",
    ):
        self._players = player_service
        self._ledger = ledger_service
        self._summaries = summary_engine
        self._locks = locks
        self._cash_symbol = cash_symbol.upper()

    def import_initial_positions(
        self,
        player_name: str,
        cash_amount: Optional[Decimal] = None,
        positions: Sequence[InitialPosition] = (),
    ) -> str:
        """
        Reset a player's ledger and record their starting cash and holdings.

        Creates the player with the default credential when the name is new.
        Returns the player id.
        """
        player, _ = self._players.get_or_create(player_name)
        self._load_player(player.player_id, cash_amount, positions)
        return player.player_id

    def import_rows(self, rows: Iterable[ImportRow]) -> ImportResult:
        """
        Import parsed upload rows, grouped by player name.

        Invalid rows are skipped with a reason. A player whose ledger writes
        fail is reported in failed_rows and the remaining players still
        import. A player whose entries were written but whose summaries could
        not be rebuilt counts as imported and is listed in stale_players.
        """
        result = ImportResult()
        batches: dict[str, _PlayerBatch] = {}

        for row in rows:
            reason = self._check_row(row)
            if reason:
                result.skipped_rows.append(
                    SkippedRow(row_number=row.row_number, reason=reason, player_name=row.player_name or None)
                )
                continue

            name = row.player_name.strip()
            batch = batches.setdefault(
                name.lower(),
                _PlayerBatch(name=name, cash=Decimal("0"), positions=[], row_numbers=[]),
            )
            batch.row_numbers.append(row.row_number)
            symbol = row.symbol.strip().upper()
            if symbol == self._cash_symbol:
                batch.cash += row.quantity * row.price
                continue
            batch.positions.append(
                InitialPosition(
                    symbol=symbol,
                    quantity=int(row.quantity),
                    price=row.price,
                    purchased_at=row.purchased_at or now_utc(),
                )
            )

        for batch in batches.values():
            try:
                player, created = self._players.get_or_create(batch.name)
                stale = self._load_player(player.player_id, batch.cash, batch.positions)
            except AppError as e:
                logger.error("Import failed for player %s: %s", batch.name, e)
                result.failed_rows.extend(
                    FailedRow(row_number=n, player_name=batch.name, error=e.message)
                    for n in batch.row_numbers
                )
                continue

            stock_value = sum((p.quantity * p.price for p in batch.positions), Decimal("0"))
            result.imported_rows.extend(batch.row_numbers)
            result.players[player.name] = player.player_id
            if created:
                result.created_players.append(player.name)
            if stale:
                result.stale_players.append(player.name)
            result.cash_report[player.name] = CashReport(
                initial_total_value=stock_value + batch.cash,
                stock_value=stock_value,
                cash=batch.cash,
            )
            logger.info(
                "%s: initial total value $%.2f (stocks $%.2f, cash $%.2f)",
                player.name, stock_value + batch.cash, stock_value, batch.cash,
            )

        logger.info(
            "Import finished: %d imported, %d skipped, %d failed rows",
            result.imported_count, result.skipped_count, result.error_count,
        )
        return result

    def _check_row(self, row: ImportRow) -> Optional[str]:
        if not (row.player_name or "").strip():
            return "Missing player name"
        symbol = (row.symbol or "").strip().upper()
        if not symbol:
            return "Missing symbol"
        if row.quantity <= 0:
            return "Quantity must be positive"
        if row.price <= 0:
            return "Price must be positive"
        if symbol != self._cash_symbol and row.quantity != row.quantity.to_integral_value():
            return "Quantity must be a whole number of shares"
        return None

    def _load_player(
        self,
        player_id: str,
        cash_amount: Optional[Decimal],
        positions: Sequence[InitialPosition],
    ) -> bool:
        """
        Replace a player's ledger and rebuild their summaries.

        Returns True when the entries were written but the rebuild failed; the
        player is then marked stale and heals on a later read.
        """
        with self._locks.hold(player_id):
            self._ledger.clear_player(player_id)
            self._summaries.discard_player(player_id)

            if cash_amount and cash_amount > 0:
                # Dated with the earliest holding so a re-import writes identical entries.
                deposited_at = min((p.purchased_at for p in positions), default=None)
                self._ledger.record_cash_deposit(
                    player_id, cash_amount, timestamp=deposited_at, notes="Initial cash"
                )
            for position in positions:
                self._ledger.record_initial_position(
                    player_id,
                    position.symbol,
                    position.quantity,
                    position.price,
                    position.purchased_at,
                )

            try:
                self._summaries.rebuild_player(player_id)
            except AppError as e:
                logger.error("Summary rebuild failed after import for player %s: %s", player_id, e)
                self._summaries.mark_stale(player_id)
                return True
        return False
