"""Shared fixtures for trade_journal tests."""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable

import pytest

from trade_journal.config import Settings
from trade_journal.ledger import Ledger
from trade_journal.metrics_engine import MetricsEngine
from trade_journal.models.trade import Trade


@pytest.fixture
def config() -> Settings:
    return Settings(
        JOURNAL_PATH="trade_journal.json",
        MONTE_CARLO_SIMULATIONS=1000,
        MONTE_CARLO_PERIODS=100,
        MONTE_CARLO_RISK_FRACTION=0.01,
        HISTOGRAM_BINS=20,
        MIN_SIMULATION_TRADES=5,
        DEFAULT_THEME="dark",
        DEFAULT_STARTING_BALANCE=0.0,
        DEFAULT_SETUPS=["Breakout", "Pullback"],
        DEFAULT_SITUATIONS=["Trending", "Choppy"],
        DEFAULT_TAGS=["A+", "FOMO"],
    )


@pytest.fixture
def ledger(config: Settings) -> Ledger:
    return Ledger(config=config)


@pytest.fixture
def engine(ledger: Ledger, config: Settings) -> MetricsEngine:
    return MetricsEngine(ledger, config)


def _trade_fields(**overrides) -> dict:
    defaults = {
        "symbol": "aapl",
        "setup": "Breakout",
        "situation": "Trending",
        "initial_risk": 50.0,
        "created_date": dt.date(2025, 1, 15),
    }
    defaults.update(overrides)
    return defaults


@pytest.fixture
def trade_fields() -> Callable[..., dict]:
    return _trade_fields


@pytest.fixture
def closed_trade(ledger: Ledger) -> Callable[..., Trade]:
    """Add a 1-share round trip whose realized P/L equals `pnl`."""

    def _make(pnl: float, **overrides) -> Trade:
        trade = ledger.add_trade(_trade_fields(**overrides))
        day = trade.created_date
        ledger.add_decision(
            trade.id, {"date": day, "action": "Buy", "quantity": 1, "price": 1000.0}
        )
        ledger.add_decision(
            trade.id, {"date": day, "action": "Sell", "quantity": 1, "price": 1000.0 + pnl}
        )
        return trade

    return _make
