"""Time helpers: ledger instants are UTC, trading dates are US/Eastern."""

from datetime import date, datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")

# Fixed-width so that ledger keys sort chronologically as plain strings.
INSTANT_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def now_utc() -> datetime:
    """Return current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC; naive values are taken as US/Eastern."""
    if dt.tzinfo is None:
        dt = EASTERN_TZ.localize(dt)
    return dt.astimezone(pytz.utc)


def format_instant(dt: datetime) -> str:
    """Render a datetime as a sortable UTC ISO instant."""
    return to_utc(dt).strftime(INSTANT_FORMAT)


def parse_instant(value: str) -> datetime:
    """Parse an ISO instant written by format_instant (or any ISO string)."""
    return to_utc(date_parser.isoparse(value))


def parse_datetime_eastern(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a free-form date/datetime string.

    If no timezone is provided in the string, assumes US/Eastern.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or EASTERN_TZ
        dt = tz.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def trading_date(dt: datetime) -> date:
    """Calendar date of an instant in market (US/Eastern) time."""
    return to_utc(dt).astimezone(EASTERN_TZ).date()
