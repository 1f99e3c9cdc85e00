"""Entry point: command-line access to the journal document."""

from __future__ import annotations

import argparse
import datetime as dt
import sys

import numpy as np
import structlog

from trade_journal.config import Settings
from trade_journal.errors import JournalError
from trade_journal.export import (
    decisions_to_csv,
    export_json,
    fund_movements_to_csv,
    summary_to_csv,
    trades_to_csv,
)
from trade_journal.formatters import ReportFormatter
from trade_journal.ledger import Ledger
from trade_journal.metrics_engine import BREAKDOWN_FIELDS, MetricsEngine
from trade_journal.models.funds import FundMovementType
from trade_journal.models.trade import DecisionAction
from trade_journal.store import JsonDocumentStore

logger = structlog.get_logger()

CSV_KINDS = ("trades", "decisions", "funds", "summary")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trade-journal", description="Trade journal ledger")
    parser.add_argument("--path", help="journal document (default: $JOURNAL_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="account and performance summary")
    summary.add_argument("--rules-only", action="store_true")
    summary.add_argument("--breakdown", choices=BREAKDOWN_FIELDS)

    sub.add_parser("trades", help="list trades")

    add_trade = sub.add_parser("add-trade", help="open a new trade")
    add_trade.add_argument("symbol")
    add_trade.add_argument("--setup", required=True)
    add_trade.add_argument("--situation", required=True)
    add_trade.add_argument("--risk", type=float, required=True, help="initial risk amount")
    add_trade.add_argument("--tag", action="append", default=[])
    add_trade.add_argument("--rules-followed", action="store_true")
    add_trade.add_argument("--date", help="created date YYYY-MM-DD")
    add_trade.add_argument("--notes", default="")

    add_decision = sub.add_parser("add-decision", help="record a buy/sell fill")
    add_decision.add_argument("trade_id")
    add_decision.add_argument("action", choices=[a.value for a in DecisionAction])
    add_decision.add_argument("quantity", type=float)
    add_decision.add_argument("price", type=float)
    add_decision.add_argument("--date", default=None)
    add_decision.add_argument("--comments", default="")

    add_funds = sub.add_parser("add-funds", help="record a deposit or withdrawal")
    add_funds.add_argument("type", choices=[t.value for t in FundMovementType])
    add_funds.add_argument("amount", type=float)
    add_funds.add_argument("--date", default=None)
    add_funds.add_argument("--comments", default="")

    starting = sub.add_parser("set-starting-balance", help="first-launch starting balance")
    starting.add_argument("amount", type=float)

    equity = sub.add_parser("equity", help="cumulative P/L curve")
    equity.add_argument("--rules-only", action="store_true")

    simulate = sub.add_parser("simulate", help="Monte Carlo resampling of R-multiples")
    simulate.add_argument("--rules-only", action="store_true")
    simulate.add_argument("--seed", type=int, default=None)

    export_csv = sub.add_parser("export-csv", help="CSV export")
    export_csv.add_argument("kind", choices=CSV_KINDS)

    sub.add_parser("export-json", help="full JSON document export")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> str:
    """Execute one command and return the text to print."""
    store = JsonDocumentStore(args.path or settings.JOURNAL_PATH, config=settings)
    ledger = store.load()
    engine = MetricsEngine(ledger, settings)
    fmt = ReportFormatter()

    if args.command == "summary":
        parts = [
            fmt.format_account(engine.account_summary()),
            fmt.format_performance(engine.performance(args.rules_only)),
        ]
        if args.breakdown:
            parts.append(
                fmt.format_breakdown(args.breakdown, engine.breakdown(args.breakdown, args.rules_only))
            )
        return "\n\n".join(parts)

    if args.command == "trades":
        if not ledger.trades:
            return "No trades"
        return "\n\n".join(fmt.format_trade(t) for t in ledger.trades)

    if args.command == "equity":
        return fmt.format_equity_curve(engine.equity_curve(args.rules_only))

    if args.command == "simulate":
        rng = np.random.default_rng(args.seed)
        return fmt.format_simulation(engine.simulate(args.rules_only, rng=rng))

    if args.command == "export-csv":
        if args.kind == "summary":
            return summary_to_csv(engine)
        exporters = {
            "trades": trades_to_csv,
            "decisions": decisions_to_csv,
            "funds": fund_movements_to_csv,
        }
        return exporters[args.kind](ledger)

    if args.command == "export-json":
        return export_json(ledger)

    output = _mutate(args, ledger, fmt)
    store.save(ledger)
    return output


def _mutate(args: argparse.Namespace, ledger: Ledger, fmt: ReportFormatter) -> str:
    if args.command == "add-trade":
        trade = ledger.add_trade(
            {
                "symbol": args.symbol,
                "setup": args.setup,
                "situation": args.situation,
                "initial_risk": args.risk,
                "tags": args.tag,
                "all_rules_followed": args.rules_followed,
                "created_date": args.date,
                "notes": args.notes,
            }
        )
        return fmt.format_trade(trade)

    if args.command == "add-decision":
        ledger.add_decision(
            args.trade_id,
            {
                "date": args.date or dt.date.today(),
                "action": args.action,
                "quantity": args.quantity,
                "price": args.price,
                "comments": args.comments,
            },
        )
        return fmt.format_trade(ledger.get_trade(args.trade_id))

    if args.command == "add-funds":
        movement = ledger.add_fund_movement(
            {
                "date": args.date,
                "type": args.type,
                "amount": args.amount,
                "comments": args.comments,
            }
        )
        return f"{movement.type.value} ${movement.amount:,.2f} recorded ({movement.id})"

    if args.command == "set-starting-balance":
        ledger.update_settings({"starting_balance": args.amount})
        return f"Starting balance ${args.amount:,.2f} recorded"

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    try:
        output = run(args, settings)
    except JournalError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
