"""CSV and JSON export of ledger records and account metrics."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from trade_journal.ledger import Ledger
    from trade_journal.metrics_engine import MetricsEngine

TRADE_COLUMNS = [
    "Symbol",
    "Setup",
    "Situation",
    "Tags",
    "Status",
    "Created Date",
    "Initial Risk",
    "Net Quantity",
    "Net P/L",
    "R-Multiple",
    "All Rules Followed",
    "Notes",
]
DECISION_COLUMNS = ["Trade ID", "Symbol", "Date", "Action", "Quantity", "Price", "Comments"]
FUND_COLUMNS = ["Date", "Type", "Amount", "Comments"]
SUMMARY_COLUMNS = ["Metric", "Value"]


def trades_frame(ledger: Ledger) -> pd.DataFrame:
    rows = [
        {
            "Symbol": t.symbol,
            "Setup": t.setup,
            "Situation": t.situation,
            "Tags": "; ".join(t.tags),
            "Status": t.status.value,
            "Created Date": t.created_date.isoformat(),
            "Initial Risk": t.initial_risk,
            "Net Quantity": t.net_quantity,
            "Net P/L": t.net_pnl,
            "R-Multiple": t.r_multiple,
            "All Rules Followed": "Yes" if t.all_rules_followed else "No",
            "Notes": t.notes,
        }
        for t in ledger.trades
    ]
    return pd.DataFrame(rows, columns=TRADE_COLUMNS)


def decisions_frame(ledger: Ledger) -> pd.DataFrame:
    rows = [
        {
            "Trade ID": t.id,
            "Symbol": t.symbol,
            "Date": d.date.isoformat(),
            "Action": d.action.value,
            "Quantity": d.quantity,
            "Price": d.price,
            "Comments": d.comments,
        }
        for t in ledger.trades
        for d in t.decisions
    ]
    return pd.DataFrame(rows, columns=DECISION_COLUMNS)


def fund_movements_frame(ledger: Ledger) -> pd.DataFrame:
    rows = [
        {
            "Date": m.date.isoformat(),
            "Type": m.type.value,
            "Amount": m.amount,
            "Comments": m.comments,
        }
        for m in ledger.fund_movements
    ]
    return pd.DataFrame(rows, columns=FUND_COLUMNS)


def summary_frame(engine: MetricsEngine) -> pd.DataFrame:
    account = engine.account_summary()
    rows = [
        ("Current Balance", account.balance),
        ("Total Additions", account.total_additions),
        ("Total Withdrawals", account.total_withdrawals),
        ("Net Funding", account.net_funding),
        ("Trading P/L", account.trading_pnl),
        ("Trading Return %", account.trading_return),
        ("Win Rate %", account.win_rate),
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def trades_to_csv(ledger: Ledger) -> str:
    return trades_frame(ledger).to_csv(index=False, float_format="%.2f")


def decisions_to_csv(ledger: Ledger) -> str:
    return decisions_frame(ledger).to_csv(index=False)


def fund_movements_to_csv(ledger: Ledger) -> str:
    return fund_movements_frame(ledger).to_csv(index=False, float_format="%.2f")


def summary_to_csv(engine: MetricsEngine) -> str:
    return summary_frame(engine).to_csv(index=False, float_format="%.2f")


def export_json(ledger: Ledger, exported_at: datetime | None = None) -> str:
    """Full document dump stamped with the export time."""
    document = ledger.serialize()
    document["exportDate"] = (exported_at or datetime.now(timezone.utc)).isoformat()
    return json.dumps(document, indent=2)
