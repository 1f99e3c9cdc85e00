"""Trade ledger and portfolio metrics engine."""

from trade_journal.ledger import Ledger
from trade_journal.metrics_engine import MetricsEngine

__all__ = ["Ledger", "MetricsEngine"]
