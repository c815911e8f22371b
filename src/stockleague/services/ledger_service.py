"""Ledger service: the append-only event log of each player."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from stockleague.core.exceptions import ValidationError
from stockleague.core.timezone import now_utc
from stockleague.domain.models import EntryType, LedgerEntry, TRADE_TYPES
from stockleague.repositories.protocols import LedgerRepository

logger = logging.getLogger(__name__)

INITIAL_IMPORT_NOTE = "Initial import from CSV"


def new_entry_id() -> str:
    return uuid.uuid4().hex


class LedgerService:
    """
    Service for recording and reading ledger entries.

    Entries are never edited in place. The only removal is clear_player,
    a full reset used before re-importing a player's starting positions.
    """

    def __init__(self, ledger_repo: LedgerRepository):
        self._ledger_repo = ledger_repo

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Write a new entry.

        Storage failures propagate as PersistenceError: the caller must
        treat the event as not recorded.
        """
        created = self._ledger_repo.append(entry)
        logger.debug(
            "Appended %s entry %s for player %s",
            entry.entry_type.value,
            entry.entry_id,
            entry.player_id,
        )
        return created

    def entries_for_player(self, player_id: str) -> list[LedgerEntry]:
        """All entries of a player, oldest first."""
        return self._ledger_repo.list_by_player(player_id)

    def entries_for_symbol(self, player_id: str, symbol: str) -> list[LedgerEntry]:
        """Entries of a player for one symbol, oldest first."""
        return [e for e in self.entries_for_player(player_id) if e.symbol == symbol]

    def clear_player(self, player_id: str) -> int:
        """Delete every entry of a player. Destructive; used only by re-import."""
        removed = self._ledger_repo.delete_by_player(player_id)
        logger.warning("Cleared %d ledger entries for player %s", removed, player_id)
        return removed

    def query_entries(
        self,
        player_id: Optional[str] = None,
        entry_types: Optional[Iterable[EntryType]] = None,
    ) -> list[LedgerEntry]:
        """
        List entries newest first.

        Without entry_types only trades (BUY/SELL) are returned.
        """
        if player_id:
            entries = self.entries_for_player(player_id)
        else:
            entries = self._ledger_repo.list_all()
        wanted = set(entry_types) if entry_types else set(TRADE_TYPES)
        filtered = [e for e in entries if e.entry_type in wanted]
        return sorted(filtered, key=lambda e: (e.timestamp, e.entry_id), reverse=True)

    def record_cash_deposit(
        self,
        player_id: str,
        amount: Decimal,
        timestamp: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> LedgerEntry:
        """Append a CASH_DEPOSIT entry."""
        if amount <= 0:
            raise ValidationError("Cash deposit must be positive")
        entry = LedgerEntry(
            entry_id=new_entry_id(),
            player_id=player_id,
            entry_type=EntryType.CASH_DEPOSIT,
            timestamp=timestamp or now_utc(),
            symbol=None,
            quantity=0,
            price_per_share=Decimal("0"),
            cash_change=amount,
            notes=notes,
        )
        return self.append(entry)

    def record_initial_position(
        self,
        player_id: str,
        symbol: str,
        quantity: int,
        purchase_price: Decimal,
        purchased_at: datetime,
        notes: Optional[str] = None,
    ) -> LedgerEntry:
        """
        Append a BUY entry for an imported holding.

        The entry moves no cash: the shares were brought into the league, not
        bought with tracked cash, so their cost counts toward the deposited
        total instead.
        """
        if quantity <= 0:
            raise ValidationError("Initial position quantity must be positive")
        if purchase_price <= 0:
            raise ValidationError("Initial position price must be positive")
        entry = LedgerEntry(
            entry_id=new_entry_id(),
            player_id=player_id,
            entry_type=EntryType.BUY,
            timestamp=purchased_at,
            symbol=symbol,
            quantity=quantity,
            price_per_share=purchase_price,
            cash_change=Decimal("0"),
            notes=notes or INITIAL_IMPORT_NOTE,
        )
        return self.append(entry)
