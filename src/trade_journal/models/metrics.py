"""Derived metric result models."""

import datetime as dt

from pydantic import BaseModel


class PerformanceSummary(BaseModel):
    total_trades: int = 0
    open_trades: int = 0
    closed_trades: int = 0
    winners: int = 0
    losers: int = 0
    net_pnl: float = 0.0
    win_rate: float = 0.0  # percent
    profit_factor: float = 0.0
    avg_winner: float = 0.0
    avg_loser: float = 0.0  # absolute value
    largest_win: float = 0.0
    largest_loss: float = 0.0
    expectancy: float = 0.0
    avg_r_multiple: float = 0.0


class CategoryStats(BaseModel):
    trades: int = 0
    wins: int = 0
    pnl: float = 0.0
    win_rate: float = 0.0


class AccountSummary(BaseModel):
    balance: float = 0.0
    total_additions: float = 0.0
    total_withdrawals: float = 0.0
    net_funding: float = 0.0
    trading_pnl: float = 0.0
    trading_return: float = 0.0  # percent of total additions
    win_rate: float = 0.0


class EquityPoint(BaseModel):
    date: dt.date
    cumulative_pnl: float


class FundHistoryEntry(BaseModel):
    id: str
    date: dt.date
    type: str
    amount: float
    comments: str = ""
    running_balance: float


class Histogram(BaseModel):
    counts: list[int] = []
    edges: list[float] = []


class SimulationResult(BaseModel):
    simulations: int
    periods: int
    risk_fraction: float
    final_equities: list[float]
    histogram: Histogram
    mean: float
    median: float
    p5: float
    p95: float
    min: float
    max: float
    loss_probability: float  # share of paths ending below 1.0
