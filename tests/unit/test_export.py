"""Unit tests for CSV / JSON export."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from trade_journal.export import (
    DECISION_COLUMNS,
    FUND_COLUMNS,
    TRADE_COLUMNS,
    decisions_to_csv,
    export_json,
    fund_movements_to_csv,
    summary_to_csv,
    trades_to_csv,
)
from trade_journal.ledger import Ledger
from trade_journal.metrics_engine import MetricsEngine


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


@pytest.fixture
def populated(ledger: Ledger) -> Ledger:
    ledger.update_settings({"starting_balance": 100_000})
    ledger.add_fund_movement(
        {"type": "Addition", "amount": 25_000, "date": "2025-01-10", "comments": 'bonus, "Q4"'}
    )
    trade = ledger.add_trade(
        {"symbol": "aapl", "setup": "Breakout", "situation": "Trending", "initial_risk": 250,
         "tags": ["A+", "Gap"], "all_rules_followed": True, "created_date": "2025-01-15",
         "notes": "clean break"}
    )
    ledger.add_decision(trade.id, {"date": "2025-01-15", "action": "Buy", "quantity": 50, "price": 150})
    ledger.add_decision(trade.id, {"date": "2025-01-17", "action": "Sell", "quantity": 50, "price": 165})
    return ledger


class TestCsv:
    def test_trade_columns_and_values(self, populated: Ledger) -> None:
        rows = _rows(trades_to_csv(populated))
        assert rows[0] == TRADE_COLUMNS
        record = dict(zip(rows[0], rows[1]))
        assert record["Symbol"] == "AAPL"
        assert record["Tags"] == "A+; Gap"
        assert record["Status"] == "Closed"
        assert record["Net P/L"] == "750.00"
        assert record["R-Multiple"] == "3.00"
        assert record["All Rules Followed"] == "Yes"

    def test_decision_rows(self, populated: Ledger) -> None:
        rows = _rows(decisions_to_csv(populated))
        assert rows[0] == DECISION_COLUMNS
        assert [r[3] for r in rows[1:]] == ["Buy", "Sell"]
        assert rows[1][1] == "AAPL"

    def test_fund_rows_quote_comments(self, populated: Ledger) -> None:
        rows = _rows(fund_movements_to_csv(populated))
        assert rows[0] == FUND_COLUMNS
        assert rows[1][1] == "StartingBalance"
        assert rows[2] == ["2025-01-10", "Addition", "25000.00", 'bonus, "Q4"']

    def test_summary(self, populated: Ledger, config) -> None:
        rows = _rows(summary_to_csv(MetricsEngine(populated, config)))
        summary = dict(rows[1:])
        assert summary["Current Balance"] == "125750.00"
        assert summary["Trading P/L"] == "750.00"
        assert summary["Win Rate %"] == "100.00"

    def test_empty_ledger_has_header_only(self, ledger: Ledger) -> None:
        assert _rows(trades_to_csv(ledger)) == [TRADE_COLUMNS]


class TestJson:
    def test_full_document_with_export_date(self, populated: Ledger) -> None:
        stamp = datetime(2025, 2, 1, tzinfo=timezone.utc)
        document = json.loads(export_json(populated, exported_at=stamp))
        assert document["exportDate"] == stamp.isoformat()
        assert len(document["trades"]) == 1
        assert len(document["fundMovements"]) == 2
        assert Ledger.deserialize(document).serialize() == populated.serialize()
