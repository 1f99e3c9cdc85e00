"""Trade, Decision Pydantic models."""

import datetime as dt
from enum import Enum

from pydantic import Field, field_validator

from trade_journal.models.base import JournalModel, new_id


class TradeStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class DecisionAction(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class Decision(JournalModel):
    """A single fill against a trade. Owned by exactly one Trade."""

    id: str = Field(default_factory=new_id)
    date: dt.date
    action: DecisionAction
    quantity: float = Field(gt=0)
    price: float = Field(gt=0)
    comments: str = ""

    @property
    def value(self) -> float:
        return self.quantity * self.price


class Trade(JournalModel):
    id: str = Field(default_factory=new_id)
    symbol: str
    setup: str
    situation: str
    tags: list[str] = []
    initial_risk: float = Field(gt=0)
    all_rules_followed: bool = False
    created_date: dt.date = Field(default_factory=dt.date.today)
    notes: str = ""
    sentiment: int = Field(default=3, ge=1, le=5)
    decisions: list[Decision] = []

    # Derived: frozen against assignment, written only by metrics_engine.recompute_trade()
    status: TradeStatus = Field(default=TradeStatus.OPEN, frozen=True)
    net_quantity: float = Field(default=0.0, frozen=True)
    net_pnl: float = Field(default=0.0, frozen=True)
    r_multiple: float = Field(default=0.0, frozen=True)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, v: list[str]) -> list[str]:
        return sorted({t.strip() for t in v if t and t.strip()})

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED
