"""
API tests for the position upload endpoint.

Tests cover:
- Importing a CSV of cash and holdings (201)
- Per-row skip reasons
- Re-upload replacing a player's ledger
- Players whose summaries could not be rebuilt reported as stale
- Rejected files (empty, missing columns)
"""

from decimal import Decimal

from fastapi.testclient import TestClient

from stockleague.app_context import LeagueContext
from stockleague.core.exceptions import PersistenceError


UPLOAD = """Player,Symbol,Quantity,PurchasePrice,Date
Alice,AAPL,10,150,2024-12-06
Alice,$CASH,1,"5,000",
Bob,MSFT,2,400,2024-12-05
Bob,XYZ,0,10,
Carol,AAPL,abc,150,
"""


def _upload(client: TestClient, text: str, name: str = "positions.csv"):
    return client.post("/imports", files={"file": (name, text.encode("utf-8"), "text/csv")})


class TestImportAPI:
    """Tests for POST /imports."""

    def test_import_csv(self, client: TestClient, league_context: LeagueContext):
        """
        GIVEN a CSV with two players and two unusable rows
        WHEN I upload it
        THEN both players are created and the bad rows are reported
        """
        response = _upload(client, UPLOAD)

        assert response.status_code == 201
        data = response.json()
        assert data["imported_count"] == 3
        assert data["skipped_count"] == 2
        assert data["error_count"] == 0
        assert sorted(data["created_players"]) == ["Alice", "Bob"]
        assert [(r["row_number"], r["reason"]) for r in data["skipped_rows"]] == [
            (5, "Quantity must be positive"),
            (6, "Invalid quantity"),
        ]
        report = data["cash_report"]["Alice"]
        assert Decimal(report["cash"]) == Decimal("5000")
        assert Decimal(report["stock_value"]) == Decimal("1500")
        assert Decimal(report["initial_total_value"]) == Decimal("6500")

        alice_id = data["players"]["Alice"]
        summary = league_context.summaries.get_player_summary(alice_id)
        assert summary.cash_balance == Decimal("5000")
        assert summary.total_deposited == Decimal("6500")

    def test_reupload_replaces_ledger(self, client: TestClient, league_context: LeagueContext):
        """
        GIVEN Alice imported and then bought more stock
        WHEN the same file is uploaded again
        THEN her trade is gone and she is not recreated
        """
        first = _upload(client, UPLOAD).json()
        alice_id = first["players"]["Alice"]
        client.post(
            f"/players/{alice_id}/trades",
            json={"symbol": "XYZ", "trade_type": "BUY", "quantity": 10, "price": "50"},
        )

        second = _upload(client, UPLOAD).json()

        assert second["created_players"] == []
        assert second["players"]["Alice"] == alice_id
        assert league_context.summaries.get_position_summary(alice_id, "XYZ") is None
        assert league_context.summaries.get_player_summary(alice_id).cash_balance == Decimal("5000")

    def test_imported_player_can_log_in(self, client: TestClient):
        _upload(client, UPLOAD)

        response = client.post("/players/login", json={"name": "Bob", "password": "changeme"})

        assert response.status_code == 200

    def test_empty_upload_is_400(self, client: TestClient):
        response = _upload(client, "")

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_missing_columns_is_400(self, client: TestClient):
        response = _upload(client, "Player,Symbol\nAlice,AAPL\n")

        assert response.status_code == 400
        assert "Quantity" in response.json()["message"]

    def test_failed_rebuild_reports_stale_players(
        self,
        client: TestClient,
        league_context: LeagueContext,
        monkeypatch,
    ):
        """
        GIVEN summary rebuilds fail while the upload is processed
        WHEN I upload the file
        THEN the rows still count as imported and the players are listed as stale
        AND their summaries are current once the store recovers
        """
        def failing_rebuild(player_id):
            raise PersistenceError("put", "PLAYER_SUMMARY", player_id, OSError("throttled"))

        monkeypatch.setattr(league_context.summaries, "rebuild_player", failing_rebuild)

        data = _upload(client, UPLOAD).json()

        assert data["imported_count"] == 3
        assert data["error_count"] == 0
        assert sorted(data["stale_players"]) == ["Alice", "Bob"]

        monkeypatch.undo()
        alice_id = data["players"]["Alice"]
        assert league_context.summaries.is_stale(alice_id)
        assert league_context.summaries.get_player_summary(alice_id).cash_balance == Decimal("5000")
        assert league_context.summaries.get_position_summary(alice_id, "AAPL").quantity == 10
