"""FundMovement Pydantic model."""

import datetime as dt
from enum import Enum

from pydantic import Field

from trade_journal.models.base import JournalModel, new_id


class FundMovementType(str, Enum):
    STARTING_BALANCE = "StartingBalance"
    ADDITION = "Addition"
    WITHDRAWAL = "Withdrawal"


class FundMovement(JournalModel):
    id: str = Field(default_factory=new_id)
    date: dt.date = Field(default_factory=dt.date.today)
    amount: float = Field(gt=0)  # always a positive magnitude
    type: FundMovementType
    comments: str = ""

    @property
    def signed_amount(self) -> float:
        if self.type == FundMovementType.WITHDRAWAL:
            return -self.amount
        return self.amount
