"""Trade service: validates orders against derived state and records them."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from stockleague.core.exceptions import (
    AppError,
    InsufficientCashError,
    InsufficientSharesError,
    NotFoundError,
    PersistenceError,
    TradePolicyError,
    ValidationError,
)
from stockleague.core.locks import PlayerLocks
from stockleague.core.timezone import now_utc
from stockleague.domain.models import EntryType, LedgerEntry, PlayerSummary, PositionSummary
from stockleague.repositories.protocols import PlayerRepository
from stockleague.services.ledger_service import LedgerService, new_entry_id
from stockleague.services.summary_engine import SummaryEngine

logger = logging.getLogger(__name__)

SINGLE_STOCK_MESSAGE = "You must sell your current stock before buying a different one"


@dataclass
class TradeValidation:
    """Outcome of validating a proposed trade, with the summaries it read."""

    valid: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    player_summary: Optional[PlayerSummary] = None
    position_summary: Optional[PositionSummary] = None


@dataclass
class TradeResult:
    """Outcome of executing a trade."""

    success: bool
    entry: Optional[LedgerEntry] = None
    player_summary: Optional[PlayerSummary] = None
    position_summary: Optional[PositionSummary] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    summaries_stale: bool = False


def normalize_symbol(symbol: str) -> str:
    return (symbol or "").strip().upper()


def coerce_quantity(quantity: Any) -> int:
    """Return quantity as int, rejecting fractions, non-numbers and values <= 0."""
    if isinstance(quantity, bool):
        raise ValidationError("Quantity must be a positive whole number")
    try:
        value = Decimal(str(quantity))
    except (InvalidOperation, ValueError):
        raise ValidationError("Quantity must be a positive whole number")
    if not value.is_finite() or value <= 0 or value != value.to_integral_value():
        raise ValidationError("Quantity must be a positive whole number")
    return int(value)


def coerce_price(price: Any) -> Decimal:
    """Return price as Decimal, rejecting non-finite values and values <= 0."""
    if isinstance(price, bool):
        raise ValidationError("Price must be a positive number")
    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise ValidationError("Price must be a positive number")
    if not value.is_finite() or value <= 0:
        raise ValidationError("Price must be a positive number")
    return value


class TradeService:
    """
    Service for validating and executing BUY/SELL orders.

    A trade is either committed (one ledger entry appended) or rejected with a
    reason and no writes. Summaries are recomputed after every commit.
    """

    def __init__(
        self,
        player_repo: PlayerRepository,
        ledger_service: LedgerService,
        summary_engine: SummaryEngine,
        locks: PlayerLocks,
        single_stock_rule: bool = False,
        cash_symbol: str = "$CASH",
    ):
        self._player_repo = player_repo
        self._ledger = ledger_service
        self._summaries = summary_engine
        self._locks = locks
        self._single_stock_rule = single_stock_rule
        self._cash_symbol = cash_symbol

    def validate_trade(
        self,
        player_id: str,
        symbol: str,
        trade_type: Union[EntryType, str],
        quantity: Any,
        price: Any,
    ) -> TradeValidation:
        """
        Check a proposed trade against the player's current summaries.

        Never writes. Rejections carry a human-readable reason and a code.

        Raises:
            PersistenceError: If the summaries cannot be read
        """
        player_summary = None
        position_summary = None
        try:
            trade_type = self._coerce_trade_type(trade_type)
            symbol = self._check_symbol(symbol)
            quantity = coerce_quantity(quantity)
            price = coerce_price(price)

            player_summary = self._summaries.get_player_summary(player_id)
            position_summary = self._summaries.get_position_summary(player_id, symbol)

            if trade_type == EntryType.BUY:
                required = quantity * price
                if required > player_summary.cash_balance:
                    raise InsufficientCashError(
                        _money(player_summary.cash_balance), _money(required)
                    )
                if self._single_stock_rule:
                    self._check_single_stock(player_id, symbol)
            else:
                held = position_summary.quantity if position_summary else 0
                if quantity > held:
                    raise InsufficientSharesError(symbol, held)
        except (NotFoundError, PersistenceError):
            raise
        except AppError as e:
            return TradeValidation(
                valid=False,
                error=e.message,
                error_code=e.code,
                player_summary=player_summary,
                position_summary=position_summary,
            )

        return TradeValidation(
            valid=True,
            player_summary=player_summary,
            position_summary=position_summary,
        )

    def execute_trade(
        self,
        player_id: str,
        symbol: str,
        trade_type: Union[EntryType, str],
        quantity: Any,
        price: Any,
        notes: Optional[str] = None,
    ) -> TradeResult:
        """
        Validate and commit a trade for a player.

        Raises:
            NotFoundError: If the player does not exist
            PersistenceError: If summaries cannot be read or the ledger
                append fails (nothing committed)
        """
        if self._player_repo.get_by_id(player_id) is None:
            raise NotFoundError("Player", player_id)

        with self._locks.hold(player_id):
            validation = self.validate_trade(player_id, symbol, trade_type, quantity, price)
            if not validation.valid:
                logger.info(
                    "Rejected %s %s for player %s: %s",
                    trade_type, symbol, player_id, validation.error,
                )
                return TradeResult(
                    success=False,
                    error=validation.error,
                    error_code=validation.error_code,
                )

            entry = self._build_entry(
                player_id,
                normalize_symbol(symbol),
                self._coerce_trade_type(trade_type),
                coerce_quantity(quantity),
                coerce_price(price),
                validation.position_summary,
                notes,
            )
            self._ledger.append(entry)
            logger.info(
                "Committed %s %d %s @ %s for player %s",
                entry.entry_type.value, entry.shares, entry.symbol,
                entry.price_per_share, player_id,
            )

            try:
                position_summary = self._summaries.recalculate_position_summary(
                    player_id, entry.symbol
                )
                player_summary = self._summaries.recalculate_player_summary(player_id)
            except AppError as e:
                logger.error(
                    "Summary recompute failed after entry %s for player %s: %s",
                    entry.entry_id, player_id, e,
                )
                self._summaries.mark_stale(player_id)
                return TradeResult(success=True, entry=entry, summaries_stale=True)

        return TradeResult(
            success=True,
            entry=entry,
            player_summary=player_summary,
            position_summary=position_summary,
        )

    # Helpers

    def _coerce_trade_type(self, trade_type: Union[EntryType, str]) -> EntryType:
        try:
            value = EntryType(str(getattr(trade_type, "value", trade_type)).upper())
        except ValueError:
            raise ValidationError(f"Unknown trade type: {trade_type}")
        if value not in (EntryType.BUY, EntryType.SELL):
            raise ValidationError("Trade type must be BUY or SELL")
        return value

    def _check_symbol(self, symbol: str) -> str:
        normalized = normalize_symbol(symbol)
        if not normalized:
            raise ValidationError("Symbol is required")
        if normalized == self._cash_symbol.upper():
            raise ValidationError(f"{self._cash_symbol} cannot be traded")
        return normalized

    def _check_single_stock(self, player_id: str, symbol: str) -> None:
        for position in self._summaries.get_position_summaries(player_id):
            if position.symbol != symbol and position.quantity > 0:
                raise TradePolicyError(SINGLE_STOCK_MESSAGE)

    def _build_entry(
        self,
        player_id: str,
        symbol: str,
        trade_type: EntryType,
        quantity: int,
        price: Decimal,
        position: Optional[PositionSummary],
        notes: Optional[str],
    ) -> LedgerEntry:
        total = quantity * price
        if trade_type == EntryType.BUY:
            return LedgerEntry(
                entry_id=new_entry_id(),
                player_id=player_id,
                entry_type=EntryType.BUY,
                timestamp=now_utc(),
                symbol=symbol,
                quantity=quantity,
                price_per_share=price,
                cash_change=-total,
                notes=notes,
            )

        avg_cost = position.average_cost_basis if position else Decimal("0")
        return LedgerEntry(
            entry_id=new_entry_id(),
            player_id=player_id,
            entry_type=EntryType.SELL,
            timestamp=now_utc(),
            symbol=symbol,
            quantity=-quantity,
            price_per_share=price,
            cash_change=total,
            cost_basis_per_share=avg_cost,
            realized_pnl=(price - avg_cost) * quantity,
            notes=notes,
        )


def _money(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01')):,.2f}"
