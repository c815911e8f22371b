"""CSV parsing for position uploads."""

import csv
import io
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional

from stockleague.core.exceptions import ValidationError
from stockleague.core.timezone import parse_datetime_eastern
from stockleague.domain.views import SkippedRow
from stockleague.services.import_service import ImportRow

# Expected CSV columns (matched case-insensitively)
CSV_COLUMNS = ["Player", "Symbol", "Quantity", "PurchasePrice", "Date"]
REQUIRED_COLUMNS = ["Player", "Symbol", "Quantity", "PurchasePrice"]


@dataclass
class ParsedCsv:
    """Rows that parsed, plus rows rejected at parse time."""

    rows: list[ImportRow] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)


def parse_positions_csv(text: str, default_date: str = "2024-12-07") -> ParsedCsv:
    """
    Parse an upload with columns Player, Symbol, Quantity, PurchasePrice, Date.

    Assumes US/Eastern when a date has no timezone; a blank date falls back
    to default_date. Row numbers are file line numbers (the header is line 1).

    Raises:
        ValidationError: If the header is missing or lacks a required column
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if not reader.fieldnames:
        raise ValidationError("CSV file is empty")

    columns = {name.strip().lower(): name for name in reader.fieldnames if name}
    missing = [c for c in REQUIRED_COLUMNS if c.lower() not in columns]
    if missing:
        raise ValidationError(f"Missing required columns: {', '.join(missing)}")

    def cell(row: dict[str, Optional[str]], column: str) -> str:
        source = columns.get(column.lower())
        value = row.get(source) if source else None
        return (value or "").strip()

    parsed = ParsedCsv()
    for row in reader:
        row_num = reader.line_num
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue

        player_name = cell(row, "Player")
        quantity = _parse_decimal(cell(row, "Quantity"))
        price = _parse_decimal(cell(row, "PurchasePrice"))
        if quantity is None:
            parsed.skipped.append(SkippedRow(row_num, "Invalid quantity", player_name or None))
            continue
        if price is None:
            parsed.skipped.append(SkippedRow(row_num, "Invalid purchase price", player_name or None))
            continue

        try:
            purchased_at = parse_datetime_eastern(cell(row, "Date") or default_date)
        except (ValueError, OverflowError):
            parsed.skipped.append(SkippedRow(row_num, "Invalid date", player_name or None))
            continue

        parsed.rows.append(
            ImportRow(
                row_number=row_num,
                player_name=player_name,
                symbol=cell(row, "Symbol").upper(),
                quantity=quantity,
                price=price,
                purchased_at=purchased_at,
            )
        )
    return parsed


def _parse_decimal(value: str) -> Optional[Decimal]:
    """Parse a number, tolerating $ and thousands separators."""
    value = value.replace("$", "").replace(",", "").strip()
    if not value:
        return None
    try:
        result = Decimal(value)
    except InvalidOperation:
        return None
    return result if result.is_finite() else None
