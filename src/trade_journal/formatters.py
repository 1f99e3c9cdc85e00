"""Plain-text report formatting for the command line."""

from __future__ import annotations

import math

from trade_journal.models.metrics import (
    AccountSummary,
    CategoryStats,
    EquityPoint,
    PerformanceSummary,
    SimulationResult,
)
from trade_journal.models.trade import Trade

HISTOGRAM_WIDTH = 40


class ReportFormatter:
    """Format metric results as plain text."""

    def format_account(self, account: AccountSummary) -> str:
        lines = [
            "Account",
            f"Balance: ${self._format_number(account.balance)}",
            f"Additions: ${self._format_number(account.total_additions)}",
            f"Withdrawals: ${self._format_number(account.total_withdrawals)}",
            f"Net Funding: ${self._format_number(account.net_funding)}",
            f"Trading P/L: {self._format_signed(account.trading_pnl)}",
            f"Trading Return: {self._format_pct(account.trading_return)}",
        ]
        return "\n".join(lines)

    def format_performance(self, perf: PerformanceSummary, title: str = "Performance") -> str:
        lines = [
            title,
            f"Trades: {perf.total_trades} ({perf.open_trades} open, {perf.closed_trades} closed)",
            f"Wins: {perf.winners} | Losses: {perf.losers}",
            f"Win Rate: {perf.win_rate:.1f}%",
            f"Net P/L: {self._format_signed(perf.net_pnl)}",
            f"Profit Factor: {self._format_ratio(perf.profit_factor)}",
            f"Avg Winner: ${self._format_number(perf.avg_winner)}",
            f"Avg Loser: ${self._format_number(perf.avg_loser)}",
            f"Expectancy: {self._format_signed(perf.expectancy)}",
            f"Avg R: {perf.avg_r_multiple:.2f}R",
        ]
        return "\n".join(lines)

    def format_breakdown(self, field: str, groups: dict[str, CategoryStats]) -> str:
        if not groups:
            return f"No closed trades by {field}"
        lines = [f"By {field}"]
        for key, stats in sorted(groups.items(), key=lambda kv: kv[1].pnl, reverse=True):
            lines.append(
                f"  {key}: {stats.trades} trades, {stats.win_rate:.0f}% win, "
                f"{self._format_signed(stats.pnl)}"
            )
        return "\n".join(lines)

    def format_trade(self, trade: Trade) -> str:
        lines = [
            f"{trade.symbol} [{trade.status.value}] {trade.id}",
            f"Setup: {trade.setup} | Situation: {trade.situation}",
            f"Net Qty: {trade.net_quantity:g} | P/L: {self._format_signed(trade.net_pnl)} "
            f"| {trade.r_multiple:.2f}R",
        ]
        return "\n".join(lines)

    def format_equity_curve(self, points: list[EquityPoint]) -> str:
        if not points:
            return "No closed trades"
        lines = ["Equity Curve"]
        for p in points:
            lines.append(f"  {p.date.isoformat()}  {self._format_signed(p.cumulative_pnl)}")
        return "\n".join(lines)

    def format_simulation(self, result: SimulationResult) -> str:
        lines = [
            "Monte Carlo",
            f"Paths: {result.simulations} x {result.periods} trades @ {result.risk_fraction:.2%} risk",
            f"Median: {result.median:.3f}x | Mean: {result.mean:.3f}x",
            f"5th-95th pct: {result.p5:.3f}x - {result.p95:.3f}x",
            f"Paths below start: {result.loss_probability:.1%}",
        ]
        counts = result.histogram.counts
        edges = result.histogram.edges
        peak = max(counts) if counts else 0
        for i, count in enumerate(counts):
            bar = "#" * (round(count / peak * HISTOGRAM_WIDTH) if peak else 0)
            lines.append(f"  {edges[i]:.3f}-{edges[i + 1]:.3f} {bar} {count}")
        return "\n".join(lines)

    def _format_number(self, value: float, decimals: int = 2) -> str:
        """Format number with commas: 102500.00 -> '102,500.00'"""
        return f"{value:,.{decimals}f}"

    def _format_signed(self, value: float) -> str:
        """Format money with sign: -750 -> '-$750.00'"""
        sign = "-" if value < 0 else "+"
        return f"{sign}${self._format_number(abs(value))}"

    def _format_pct(self, value: float) -> str:
        """Format percent value: 1.2 -> '+1.20%'"""
        sign = "+" if value >= 0 else ""
        return f"{sign}{value:.2f}%"

    def _format_ratio(self, value: float) -> str:
        if math.isinf(value):
            return "inf"
        return f"{value:.2f}"
