"""Bulk upload of players' starting positions."""

from fastapi import APIRouter, Depends, File, UploadFile

from stockleague.api.deps import get_context
from stockleague.api.schemas import ImportResultResponse
from stockleague.api.schemas.imports import (
    CashReportResponse,
    FailedRowResponse,
    SkippedRowResponse,
)
from stockleague.app_context import LeagueContext
from stockleague.core.exceptions import ValidationError
from stockleague.csv import parse_positions_csv

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post("", response_model=ImportResultResponse, status_code=201)
def import_positions(
    file: UploadFile = File(...),
    ctx: LeagueContext = Depends(get_context),
):
    """
    Import a CSV of Player, Symbol, Quantity, PurchasePrice, Date rows.

    Each player in the file has their ledger replaced by the uploaded cash
    and holdings. Rows that cannot be used are reported as skipped.
    """
    raw = file.file.read()
    if not raw:
        raise ValidationError("Uploaded file is empty.")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("Uploaded file must be UTF-8 encoded CSV.")

    parsed = parse_positions_csv(text, default_date=ctx.settings.default_import_date)
    result = ctx.imports.import_rows(parsed.rows)
    skipped = sorted(parsed.skipped + result.skipped_rows, key=lambda r: r.row_number)

    return ImportResultResponse(
        imported_count=result.imported_count,
        skipped_count=len(skipped),
        error_count=result.error_count,
        players=result.players,
        created_players=result.created_players,
        skipped_rows=[SkippedRowResponse.model_validate(r) for r in skipped],
        failed_rows=[FailedRowResponse.model_validate(r) for r in result.failed_rows],
        cash_report={
            name: CashReportResponse.model_validate(report)
            for name, report in result.cash_report.items()
        },
        stale_players=result.stale_players,
    )
