"""Per-trade recomputation and aggregate performance metrics."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import TYPE_CHECKING

import numpy as np
import structlog

from trade_journal.config import Settings
from trade_journal.errors import ValidationError
from trade_journal.models.funds import FundMovementType
from trade_journal.models.metrics import (
    AccountSummary,
    CategoryStats,
    EquityPoint,
    FundHistoryEntry,
    PerformanceSummary,
    SimulationResult,
)
from trade_journal.models.trade import DecisionAction, Trade, TradeStatus
from trade_journal.simulation import MonteCarloSimulator

if TYPE_CHECKING:
    from trade_journal.ledger import Ledger

logger = structlog.get_logger()

QUANTITY_TOLERANCE = 1e-9
BREAKDOWN_FIELDS = ("setup", "situation", "tag")


def recompute_trade(trade: Trade) -> Trade:
    """
    Rebuild status, net_quantity, net_pnl and r_multiple from the decisions.

    This is the only place derived trade fields are written; the Trade model
    rejects direct assignment to them. Realized P/L uses
    one blended average buy price applied to every sell (no FIFO lot matching).
    Short sequences (sells before buys) are not modeled: a trade closed with no
    buys, or no sells, realizes 0.
    """
    net_quantity = 0.0
    buy_value = 0.0
    total_bought = 0.0
    sell_value = 0.0
    total_sold = 0.0

    for decision in trade.decisions:
        if decision.action == DecisionAction.BUY:
            net_quantity += decision.quantity
            buy_value += decision.value
            total_bought += decision.quantity
        else:
            net_quantity -= decision.quantity
            sell_value += decision.value
            total_sold += decision.quantity

    closed = bool(trade.decisions) and math.isclose(
        net_quantity, 0.0, abs_tol=QUANTITY_TOLERANCE
    )
    net_pnl = 0.0
    if closed and total_bought > 0 and total_sold > 0:
        avg_buy_price = buy_value / total_bought
        net_pnl = sell_value - total_sold * avg_buy_price

    # Derived fields are frozen on the model; bypass the assignment guard here only.
    trade.__dict__.update(
        status=TradeStatus.CLOSED if closed else TradeStatus.OPEN,
        net_quantity=0.0 if closed else net_quantity,
        net_pnl=net_pnl,
        r_multiple=net_pnl / trade.initial_risk,
    )
    return trade


class MetricsEngine:
    """Read-only derivations over a Ledger snapshot."""

    def __init__(
        self,
        ledger: Ledger,
        settings: Settings | None = None,
        simulator: MonteCarloSimulator | None = None,
    ) -> None:
        self.ledger = ledger
        self.settings = settings or ledger.config
        self.simulator = simulator or MonteCarloSimulator(self.settings)

    # --- trade selection ---

    def select_trades(self, rules_only: bool = False) -> list[Trade]:
        trades = self.ledger.trades
        if rules_only:
            return [t for t in trades if t.all_rules_followed]
        return trades

    def closed_trades(self, rules_only: bool = False) -> list[Trade]:
        return [t for t in self.select_trades(rules_only) if t.is_closed]

    # --- performance ---

    def performance(self, rules_only: bool = False) -> PerformanceSummary:
        """Win rate, profit factor, average winner/loser over closed trades."""
        selected = self.select_trades(rules_only)
        closed = [t for t in selected if t.is_closed]
        summary = PerformanceSummary(
            total_trades=len(selected),
            open_trades=len(selected) - len(closed),
            closed_trades=len(closed),
        )
        if not closed:
            return summary

        pnls = [t.net_pnl for t in closed]
        wins = [p for p in pnls if p > 0]
        losses = [p for p in pnls if p < 0]

        sum_wins = sum(wins)
        sum_losses = abs(sum(losses))
        if sum_losses > 0:
            profit_factor = sum_wins / sum_losses
        elif sum_wins > 0:
            profit_factor = float("inf")
        else:
            profit_factor = 0.0

        net_pnl = sum(pnls)
        summary.winners = len(wins)
        summary.losers = len(losses)
        summary.net_pnl = net_pnl
        summary.win_rate = len(wins) / len(closed) * 100
        summary.profit_factor = profit_factor
        summary.avg_winner = sum_wins / len(wins) if wins else 0.0
        summary.avg_loser = sum_losses / len(losses) if losses else 0.0
        summary.largest_win = max(wins) if wins else 0.0
        summary.largest_loss = min(losses) if losses else 0.0
        summary.expectancy = net_pnl / len(closed)
        summary.avg_r_multiple = sum(t.r_multiple for t in closed) / len(closed)
        return summary

    def breakdown(self, field: str, rules_only: bool = False) -> dict[str, CategoryStats]:
        """Group closed trades by setup, situation or tag."""
        if field not in BREAKDOWN_FIELDS:
            raise ValidationError(
                f"Invalid breakdown field '{field}'. Must be one of {list(BREAKDOWN_FIELDS)}"
            )

        groups: dict[str, CategoryStats] = defaultdict(CategoryStats)
        for trade in self.closed_trades(rules_only):
            keys = trade.tags if field == "tag" else [getattr(trade, field)]
            for key in keys:
                stats = groups[key]
                stats.trades += 1
                stats.pnl += trade.net_pnl
                if trade.net_pnl > 0:
                    stats.wins += 1

        for stats in groups.values():
            stats.win_rate = stats.wins / stats.trades * 100 if stats.trades > 0 else 0.0
        return dict(groups)

    # --- account ---

    def total_additions(self) -> float:
        return sum(
            m.amount
            for m in self.ledger.fund_movements
            if m.type != FundMovementType.WITHDRAWAL
        )

    def total_withdrawals(self) -> float:
        return sum(
            m.amount
            for m in self.ledger.fund_movements
            if m.type == FundMovementType.WITHDRAWAL
        )

    def trading_pnl(self) -> float:
        """Realized P/L over every trade, ignoring any rules filter."""
        return sum(t.net_pnl for t in self.ledger.trades)

    def account_balance(self) -> float:
        movements = sorted(self.ledger.fund_movements, key=lambda m: m.date)
        funding = sum(m.signed_amount for m in movements)
        return funding + self.trading_pnl()

    def account_summary(self) -> AccountSummary:
        additions = self.total_additions()
        withdrawals = self.total_withdrawals()
        trading_pnl = self.trading_pnl()
        return AccountSummary(
            balance=self.account_balance(),
            total_additions=additions,
            total_withdrawals=withdrawals,
            net_funding=additions - withdrawals,
            trading_pnl=trading_pnl,
            trading_return=trading_pnl / additions * 100 if additions > 0 else 0.0,
            win_rate=self.performance().win_rate,
        )

    def fund_history(self) -> list[FundHistoryEntry]:
        """Fund movements in date order with the running funding balance."""
        entries: list[FundHistoryEntry] = []
        running = 0.0
        for movement in sorted(self.ledger.fund_movements, key=lambda m: m.date):
            running += movement.signed_amount
            entries.append(
                FundHistoryEntry(
                    id=movement.id,
                    date=movement.date,
                    type=movement.type.value,
                    amount=movement.amount,
                    comments=movement.comments,
                    running_balance=running,
                )
            )
        return entries

    # --- curves and simulation ---

    def equity_curve(self, rules_only: bool = False) -> list[EquityPoint]:
        """Cumulative realized P/L of closed trades by created date (stable sort)."""
        closed = sorted(self.closed_trades(rules_only), key=lambda t: t.created_date)
        if not closed:
            return []

        points = [EquityPoint(date=closed[0].created_date, cumulative_pnl=0.0)]
        cumulative = 0.0
        for trade in closed:
            cumulative += trade.net_pnl
            points.append(EquityPoint(date=trade.created_date, cumulative_pnl=cumulative))
        return points

    def r_multiples(self, rules_only: bool = False) -> list[float]:
        return [t.r_multiple for t in self.closed_trades(rules_only)]

    def simulate(
        self,
        rules_only: bool = False,
        rng: np.random.Generator | None = None,
    ) -> SimulationResult:
        """Bootstrap the closed-trade R-multiples into a final-equity distribution."""
        simulator = self.simulator if rng is None else MonteCarloSimulator(self.settings, rng)
        result = simulator.simulate(self.r_multiples(rules_only))
        logger.info(
            "simulation_complete",
            rules_only=rules_only,
            simulations=result.simulations,
            median=result.median,
        )
        return result
