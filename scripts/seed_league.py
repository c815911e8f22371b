#!/usr/bin/env python3
"""
Seed a league with sample players, starting positions and a few trades.
Uses the stub price provider so it runs offline.

Usage: python scripts/seed_league.py [DATA_DIR]
"""

import random
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from stockleague.app_context import LeagueContext
from stockleague.config import Settings, setup_logging
from stockleague.core.timezone import parse_datetime_eastern
from stockleague.domain.models import EntryType
from stockleague.services import InitialPosition

PLAYERS = ["Alice", "Bob", "Carol", "Dave"]

STOCKS = [
    ("AAPL", Decimal("180.00")),
    ("MSFT", Decimal("420.00")),
    ("GOOGL", Decimal("160.00")),
    ("AMZN", Decimal("150.00")),
    ("NVDA", Decimal("500.00")),
]


def seed_league(data_dir: Path) -> None:
    """Import starting positions for each player, then place random trades."""
    settings = Settings(data_dir=data_dir, price_provider="stub")
    setup_logging(settings)
    ctx = LeagueContext(settings)
    rng = random.Random(7)

    start = date.today() - timedelta(days=30)
    print(f"Seeding {len(PLAYERS)} players into {settings.get_data_dir()}")
    print("=" * 60)

    for name in PLAYERS:
        picks = rng.sample(STOCKS, 2)
        positions = [
            InitialPosition(
                symbol=symbol,
                quantity=rng.randint(5, 20),
                price=price,
                purchased_at=parse_datetime_eastern(start.isoformat()),
            )
            for symbol, price in picks
        ]
        player_id = ctx.imports.import_initial_positions(
            name, cash_amount=Decimal("5000"), positions=positions
        )
        summary = ctx.summaries.get_player_summary(player_id)
        print(f"✓ {name}: deposited ${summary.total_deposited:,.2f}")

        for _ in range(3):
            symbol, _ = rng.choice(STOCKS)
            price = ctx.prices.get_current_price(symbol)
            trade_type = rng.choice([EntryType.BUY, EntryType.SELL])
            result = ctx.trades.execute_trade(player_id, symbol, trade_type, rng.randint(1, 5), price)
            status = "✓" if result.success else f"✗ {result.error}"
            print(f"    {trade_type.value} {symbol} @ {price}: {status}")

    print("=" * 60)
    for view in ctx.valuation.leaderboard():
        print(f"{view.player_name:<8} total ${view.total_value:>12,.2f}  P&L {view.total_pnl_percent}%")


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd() / "data"
    seed_league(target)
