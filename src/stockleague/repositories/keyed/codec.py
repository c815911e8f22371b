"""Key scheme and record (de)serialization for the keyed repositories."""

from datetime import date
from decimal import Decimal
from typing import Optional

from stockleague.core.timezone import format_instant, parse_instant
from stockleague.domain.models import LedgerEntry, PlayerSummary, PositionSummary, Player
from stockleague.repositories.protocols.record_store import Record

KEY_SEPARATOR = "#"


# Keys


def ledger_key(entry: LedgerEntry) -> str:
    """player#timestamp#id: prefix scans come back in chronological order."""
    return KEY_SEPARATOR.join(
        [entry.player_id, format_instant(entry.timestamp), entry.entry_id]
    )


def player_prefix(player_id: str) -> str:
    return f"{player_id}{KEY_SEPARATOR}"


def position_key(player_id: str, symbol: str) -> str:
    return f"{player_id}{KEY_SEPARATOR}{symbol}"


# Scalars


def _dec(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _to_dec(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _day(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _to_day(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _instant(value) -> Optional[str]:
    return format_instant(value) if value is not None else None


def _to_instant(value: Optional[str]):
    return parse_instant(value) if value else None


# Ledger entries


def entry_to_record(entry: LedgerEntry) -> Record:
    return {
        "entry_id": entry.entry_id,
        "player_id": entry.player_id,
        "entry_type": entry.entry_type.value,
        "timestamp": format_instant(entry.timestamp),
        "symbol": entry.symbol,
        "quantity": entry.quantity,
        "price_per_share": _dec(entry.price_per_share),
        "cash_change": _dec(entry.cash_change),
        "cost_basis_per_share": _dec(entry.cost_basis_per_share),
        "realized_pnl": _dec(entry.realized_pnl),
        "notes": entry.notes,
    }


def record_to_entry(record: Record) -> LedgerEntry:
    return LedgerEntry(
        entry_id=record["entry_id"],
        player_id=record["player_id"],
        entry_type=record["entry_type"],
        timestamp=parse_instant(record["timestamp"]),
        symbol=record.get("symbol"),
        quantity=int(record.get("quantity") or 0),
        price_per_share=_to_dec(record.get("price_per_share")) or Decimal("0"),
        cash_change=_to_dec(record.get("cash_change")) or Decimal("0"),
        cost_basis_per_share=_to_dec(record.get("cost_basis_per_share")),
        realized_pnl=_to_dec(record.get("realized_pnl")),
        notes=record.get("notes"),
    )


# Summaries


def position_to_record(position: PositionSummary) -> Record:
    return {
        "player_id": position.player_id,
        "symbol": position.symbol,
        "quantity": position.quantity,
        "average_cost_basis": _dec(position.average_cost_basis),
        "total_cost_basis": _dec(position.total_cost_basis),
        "first_purchase_date": _day(position.first_purchase_date),
        "last_activity_date": _day(position.last_activity_date),
        "last_updated": _instant(position.last_updated),
    }


def record_to_position(record: Record) -> PositionSummary:
    return PositionSummary(
        player_id=record["player_id"],
        symbol=record["symbol"],
        quantity=int(record["quantity"]),
        average_cost_basis=Decimal(record["average_cost_basis"]),
        total_cost_basis=Decimal(record["total_cost_basis"]),
        first_purchase_date=_to_day(record.get("first_purchase_date")),
        last_activity_date=_to_day(record.get("last_activity_date")),
        last_updated=_to_instant(record.get("last_updated")),
    )


def player_summary_to_record(summary: PlayerSummary) -> Record:
    return {
        "player_id": summary.player_id,
        "cash_balance": _dec(summary.cash_balance),
        "total_deposited": _dec(summary.total_deposited),
        "total_realized_pnl": _dec(summary.total_realized_pnl),
        "last_updated": _instant(summary.last_updated),
    }


def record_to_player_summary(record: Record) -> PlayerSummary:
    return PlayerSummary(
        player_id=record["player_id"],
        cash_balance=_to_dec(record.get("cash_balance")) or Decimal("0"),
        total_deposited=_to_dec(record.get("total_deposited")) or Decimal("0"),
        total_realized_pnl=_to_dec(record.get("total_realized_pnl")) or Decimal("0"),
        last_updated=_to_instant(record.get("last_updated")),
    )


# Players


def player_to_record(player: Player) -> Record:
    return {
        "player_id": player.player_id,
        "name": player.name,
        "password_hash": player.password_hash,
        "created_at": _instant(player.created_at),
    }


def record_to_player(record: Record) -> Player:
    return Player(
        player_id=record["player_id"],
        name=record["name"],
        password_hash=record["password_hash"],
        created_at=_to_instant(record.get("created_at")),
    )
