"""
Pytest configuration and fixtures for stock league tests.

This module provides:
- Record store fixtures (JSON files and in-memory SQLite)
- Repository and service fixtures wired like LeagueContext
- Deterministic and failing price providers
- Factory helpers for players and ledger entries
- Time helpers for Eastern timezone
"""

import functools
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from stockleague.app_context import LeagueContext
from stockleague.config.settings import Settings
from stockleague.core.locks import PlayerLocks
from stockleague.core.passwords import hash_password
from stockleague.core.timezone import EASTERN_TZ, now_utc, trading_date
from stockleague.domain.models import EntryType, LedgerEntry, Player
from stockleague.domain.views import PricePoint
from stockleague.main import create_app
from stockleague.repositories import (
    KeyedLedgerRepository,
    KeyedPlayerRepository,
    KeyedSummaryRepository,
)
from stockleague.repositories.jsonfile import JsonFileRecordStore
from stockleague.repositories.sqlalchemy import (
    SqlAlchemyRecordStore,
    build_engine,
    build_session_factory,
    init_db,
)
from stockleague.services import (
    ImportService,
    LedgerService,
    PlayerService,
    PriceService,
    SummaryEngine,
    TradeService,
    ValuationService,
)


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


# =============================================================================
# PASSWORD HASHING
# =============================================================================


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Use few PBKDF2 iterations so registering players stays fast."""
    monkeypatch.setattr(
        "stockleague.services.player_service.hash_password",
        functools.partial(hash_password, iterations=1000),
    )


# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        storage_backend="file",
        price_provider="stub",
        log_level="WARNING",
    )


# =============================================================================
# RECORD STORE FIXTURES
# =============================================================================


def make_sql_store(url: str = "sqlite:///:memory:") -> SqlAlchemyRecordStore:
    """Build a table record store on a fresh engine."""
    engine = build_engine(url)
    init_db(engine)
    return SqlAlchemyRecordStore(build_session_factory(engine))


@pytest.fixture
def record_store(tmp_path) -> JsonFileRecordStore:
    """Provide the default (JSON file) record store."""
    return JsonFileRecordStore(tmp_path / "records")


@pytest.fixture(params=["file", "sql"])
def any_record_store(request, tmp_path):
    """Provide each record store backend in turn."""
    if request.param == "file":
        return JsonFileRecordStore(tmp_path / "records")
    return make_sql_store()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def player_repo(record_store) -> KeyedPlayerRepository:
    """Provide test PlayerRepository."""
    return KeyedPlayerRepository(record_store)


@pytest.fixture
def ledger_repo(record_store) -> KeyedLedgerRepository:
    """Provide test LedgerRepository."""
    return KeyedLedgerRepository(record_store)


@pytest.fixture
def summary_repo(record_store) -> KeyedSummaryRepository:
    """Provide test SummaryRepository."""
    return KeyedSummaryRepository(record_store)


# =============================================================================
# PRICE FIXTURES
# =============================================================================


class StaticPriceProvider:
    """
    Deterministic price provider for testing.

    Serves fixed current prices and one previous close per symbol, and
    counts calls so caching can be checked.
    """

    CURRENT = {
        "AAPL": Decimal("150.00"),
        "MSFT": Decimal("400.00"),
        "XYZ": Decimal("50.00"),
    }
    PREVIOUS = {
        "AAPL": Decimal("140.00"),
        "MSFT": Decimal("410.00"),
    }

    def __init__(
        self,
        current: Optional[dict[str, Decimal]] = None,
        previous: Optional[dict[str, Decimal]] = None,
    ):
        self.current = dict(self.CURRENT if current is None else current)
        self.previous = dict(self.PREVIOUS if previous is None else previous)
        self.price_calls = 0
        self.history_calls = 0

    def get_current_price(self, symbol: str) -> Optional[Decimal]:
        self.price_calls += 1
        return self.current.get(symbol.upper())

    def get_historical_prices(self, symbol: str, since: date) -> list[PricePoint]:
        self.history_calls += 1
        close = self.previous.get(symbol.upper())
        if close is None:
            return []
        today = trading_date(now_utc())
        return [
            PricePoint(date=today - timedelta(days=2), price=close - 1),
            PricePoint(date=today - timedelta(days=1), price=close),
        ]


class FailingPriceProvider:
    """Price provider that always raises an exception."""

    def get_current_price(self, symbol: str) -> Optional[Decimal]:
        raise ConnectionError("Network unavailable")

    def get_historical_prices(self, symbol: str, since: date) -> list[PricePoint]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def price_provider() -> StaticPriceProvider:
    """Provide deterministic price provider."""
    return StaticPriceProvider()


@pytest.fixture
def failing_provider() -> FailingPriceProvider:
    """Provide a price provider that always fails."""
    return FailingPriceProvider()


@pytest.fixture
def price_service(price_provider) -> PriceService:
    """Provide test PriceService with deterministic provider."""
    return PriceService(provider=price_provider, ttl_seconds=60)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def locks() -> PlayerLocks:
    return PlayerLocks()


@pytest.fixture
def player_service(player_repo) -> PlayerService:
    """Provide test PlayerService."""
    return PlayerService(player_repo, default_password="changeme")


@pytest.fixture
def ledger_service(ledger_repo) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(ledger_repo)


@pytest.fixture
def summary_engine(ledger_service, summary_repo, locks) -> SummaryEngine:
    """Provide test SummaryEngine sharing the service lock registry."""
    return SummaryEngine(ledger_service, summary_repo, locks=locks)


@pytest.fixture
def trade_service(player_repo, ledger_service, summary_engine, locks) -> TradeService:
    """Provide test TradeService."""
    return TradeService(
        player_repo=player_repo,
        ledger_service=ledger_service,
        summary_engine=summary_engine,
        locks=locks,
    )


@pytest.fixture
def import_service(player_service, ledger_service, summary_engine, locks) -> ImportService:
    """Provide test ImportService."""
    return ImportService(
        player_service=player_service,
        ledger_service=ledger_service,
        summary_engine=summary_engine,
        locks=locks,
    )


@pytest.fixture
def valuation_service(player_service, summary_engine, price_service, ledger_service) -> ValuationService:
    """Provide test ValuationService."""
    return ValuationService(
        player_service=player_service,
        summary_engine=summary_engine,
        price_service=price_service,
        ledger_service=ledger_service,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def player_factory(player_service) -> Callable[..., Player]:
    """Factory for registering test players."""

    def _create_player(name: Optional[str] = None, password: Optional[str] = None) -> Player:
        if name is None:
            name = f"Player {uuid.uuid4().hex[:8]}"
        return player_service.register(name, password)

    return _create_player


@pytest.fixture
def funded_player_factory(player_factory, ledger_service, summary_engine) -> Callable[..., Player]:
    """Factory for players holding only a cash deposit, summaries rebuilt."""

    def _create_funded(amount: Decimal = Decimal("10000"), name: Optional[str] = None) -> Player:
        player = player_factory(name)
        ledger_service.record_cash_deposit(player.player_id, amount)
        summary_engine.rebuild_player(player.player_id)
        return player

    return _create_funded


@pytest.fixture
def funded_player(funded_player_factory) -> Player:
    """A player with $10,000 cash."""
    return funded_player_factory(Decimal("10000"), name="Alice")


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def league_context(settings, price_provider) -> LeagueContext:
    """LeagueContext on isolated settings with deterministic prices."""
    return LeagueContext(settings, price_provider=price_provider)


@pytest.fixture
def client(league_context) -> TestClient:
    """Provide FastAPI test client bound to the test context."""
    app = create_app(context=league_context)
    with TestClient(app) as c:
        yield c


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(actual) - Decimal(expected))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def make_entry(
    player_id: str,
    entry_type: EntryType,
    symbol: Optional[str] = None,
    quantity: int = 0,
    price: Decimal = Decimal("0"),
    cash_change: Optional[Decimal] = None,
    timestamp: Optional[datetime] = None,
    realized_pnl: Optional[Decimal] = None,
    cost_basis_per_share: Optional[Decimal] = None,
) -> LedgerEntry:
    """
    Build a ledger entry with signed quantity and cash filled in.

    BUY and SELL default their cash change to the trade's notional; pass
    cash_change=Decimal("0") for an imported holding.
    """
    if cash_change is None:
        notional = abs(quantity) * price
        if entry_type == EntryType.BUY:
            cash_change = -notional
        elif entry_type == EntryType.SELL:
            cash_change = notional
        else:
            cash_change = Decimal("0")
    if entry_type == EntryType.SELL and quantity > 0:
        quantity = -quantity
    return LedgerEntry(
        entry_id=uuid.uuid4().hex,
        player_id=player_id,
        entry_type=entry_type,
        timestamp=timestamp or now_utc(),
        symbol=symbol,
        quantity=quantity,
        price_per_share=price,
        cash_change=cash_change,
        cost_basis_per_share=cost_basis_per_share,
        realized_pnl=realized_pnl,
    )
