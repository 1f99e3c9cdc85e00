"""Unit tests for ReportFormatter (plain text)."""

from __future__ import annotations

import datetime as dt

import pytest

from trade_journal.formatters import ReportFormatter
from trade_journal.models.metrics import (
    AccountSummary,
    CategoryStats,
    EquityPoint,
    Histogram,
    PerformanceSummary,
    SimulationResult,
)


@pytest.fixture
def formatter() -> ReportFormatter:
    return ReportFormatter()


class TestFormatAccount:
    def test_contains_balance_with_commas(self, formatter: ReportFormatter) -> None:
        text = formatter.format_account(
            AccountSummary(balance=125750.0, total_additions=125000.0, trading_pnl=750.0,
                           trading_return=0.6)
        )
        assert "Balance: $125,750.00" in text
        assert "Trading P/L: +$750.00" in text
        assert "Trading Return: +0.60%" in text


class TestFormatPerformance:
    def test_infinite_profit_factor(self, formatter: ReportFormatter) -> None:
        text = formatter.format_performance(
            PerformanceSummary(closed_trades=2, winners=2, win_rate=100.0,
                               profit_factor=float("inf"))
        )
        assert "Profit Factor: inf" in text
        assert "Win Rate: 100.0%" in text

    def test_negative_pnl(self, formatter: ReportFormatter) -> None:
        text = formatter.format_performance(PerformanceSummary(net_pnl=-1234.5))
        assert "Net P/L: -$1,234.50" in text


class TestFormatBreakdown:
    def test_sorted_by_pnl(self, formatter: ReportFormatter) -> None:
        text = formatter.format_breakdown(
            "setup",
            {
                "Pullback": CategoryStats(trades=1, wins=0, pnl=-10.0),
                "Breakout": CategoryStats(trades=2, wins=2, pnl=300.0, win_rate=100.0),
            },
        )
        lines = text.splitlines()
        assert lines[0] == "By setup"
        assert lines[1].strip().startswith("Breakout")

    def test_empty(self, formatter: ReportFormatter) -> None:
        assert formatter.format_breakdown("tag", {}) == "No closed trades by tag"


class TestFormatCurves:
    def test_equity_curve(self, formatter: ReportFormatter) -> None:
        text = formatter.format_equity_curve(
            [EquityPoint(date=dt.date(2025, 1, 1), cumulative_pnl=0.0),
             EquityPoint(date=dt.date(2025, 1, 2), cumulative_pnl=-20.0)]
        )
        assert "2025-01-02  -$20.00" in text

    def test_empty_equity_curve(self, formatter: ReportFormatter) -> None:
        assert formatter.format_equity_curve([]) == "No closed trades"

    def test_simulation_histogram_rows(self, formatter: ReportFormatter) -> None:
        result = SimulationResult(
            simulations=4, periods=10, risk_fraction=0.01, final_equities=[0.9, 1.0, 1.1, 1.1],
            histogram=Histogram(counts=[1, 1, 2], edges=[0.9, 0.9667, 1.0333, 1.1]),
            mean=1.025, median=1.05, p5=0.915, p95=1.1, min=0.9, max=1.1, loss_probability=0.25,
        )
        lines = formatter.format_simulation(result).splitlines()
        assert "Paths below start: 25.0%" in lines
        assert lines[-1].endswith("#" * 40 + " 2")
