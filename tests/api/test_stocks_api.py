"""
API tests for market price endpoints.

Tests cover:
- Quoting one symbol or a list of symbols
- Missing quotes (404 for one symbol, null in a list)
- Daily price history
"""

from datetime import timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from stockleague.core.timezone import now_utc, trading_date


class TestStockPricesAPI:
    """Tests for GET /stocks."""

    def test_single_symbol(self, client: TestClient):
        response = client.get("/stocks", params={"symbol": " aapl "})

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "AAPL"
        assert Decimal(data["price"]) == Decimal("150")

    def test_single_symbol_without_quote_is_404(self, client: TestClient):
        response = client.get("/stocks", params={"symbol": "NOPE"})

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_symbol_list(self, client: TestClient):
        """
        GIVEN a list with two quoted symbols and one unknown
        WHEN I request their prices
        THEN known symbols have prices and the unknown one is null
        """
        response = client.get("/stocks", params={"symbols": "aapl, MSFT,NOPE,"})

        assert response.status_code == 200
        prices = response.json()["prices"]
        assert Decimal(prices["AAPL"]) == Decimal("150")
        assert Decimal(prices["MSFT"]) == Decimal("400")
        assert prices["NOPE"] is None
        assert len(prices) == 3

    def test_symbol_required(self, client: TestClient):
        response = client.get("/stocks")

        assert response.status_code == 400
        assert response.json() == {
            "error": "VALIDATION_ERROR",
            "message": "Symbol or symbols parameter required",
        }


class TestStockHistoryAPI:
    """Tests for GET /stocks/{symbol}/history."""

    def test_history(self, client: TestClient):
        today = trading_date(now_utc())

        response = client.get("/stocks/msft/history", params={"days": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["symbol"] == "MSFT"
        assert [p["date"] for p in data["history"]] == [
            (today - timedelta(days=2)).isoformat(),
            (today - timedelta(days=1)).isoformat(),
        ]
        assert [Decimal(p["price"]) for p in data["history"]] == [Decimal("409"), Decimal("410")]

    def test_unknown_symbol_has_empty_history(self, client: TestClient):
        data = client.get("/stocks/NOPE/history").json()

        assert data == {"symbol": "NOPE", "history": []}
