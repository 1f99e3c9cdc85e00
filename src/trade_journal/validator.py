"""Input validation for ledger mutations (field checks, not trading rules)."""

from __future__ import annotations

import datetime as dt
import math
from typing import Any

import structlog
from pydantic import BaseModel

from trade_journal.models.funds import FundMovementType
from trade_journal.models.journal_settings import THEMES, JournalSettings, SettingsPatch
from trade_journal.models.trade import DecisionAction

logger = structlog.get_logger()

REQUIRED_TRADE_TEXT = ("symbol", "setup", "situation")
VALID_ACTIONS = {a.value for a in DecisionAction}
VALID_FUND_TYPES = {t.value for t in FundMovementType}


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = []


class EntryValidator:
    """
    Field validation for caller-supplied dicts:
    - Required text fields present and non-empty
    - Monetary amounts, quantities and prices > 0
    - Enumerated values (decision action, fund movement type, theme) recognized
    - Dates present and ISO formatted
    """

    def validate_trade(self, fields: dict[str, Any], partial: bool = False) -> ValidationResult:
        """Validate new-trade fields. With partial=True only supplied keys are checked."""
        errors: list[str] = []

        for name in REQUIRED_TRADE_TEXT:
            if partial and name not in fields:
                continue
            self._require_text(fields, name, errors)

        if not partial or "initial_risk" in fields:
            self._require_positive(fields, "initial_risk", errors)
        if "created_date" in fields and fields["created_date"] is not None:
            self._require_date(fields, "created_date", errors)
        if "sentiment" in fields:
            self._validate_sentiment(fields["sentiment"], errors)
        if "tags" in fields:
            self._validate_labels(fields["tags"], "tags", errors)

        return self._result(errors, "trade")

    def validate_decision(self, fields: dict[str, Any]) -> ValidationResult:
        errors: list[str] = []

        self._require_date(fields, "date", errors)
        self._require_positive(fields, "quantity", errors)
        self._require_positive(fields, "price", errors)
        action = fields.get("action")
        if action is None or self._enum_value(action) not in VALID_ACTIONS:
            errors.append(f"Invalid action '{action}'. Must be one of {sorted(VALID_ACTIONS)}")

        return self._result(errors, "decision")

    def validate_fund_movement(self, fields: dict[str, Any]) -> ValidationResult:
        errors: list[str] = []

        self._require_positive(fields, "amount", errors)
        movement_type = fields.get("type")
        if movement_type is None or self._enum_value(movement_type) not in VALID_FUND_TYPES:
            errors.append(
                f"Invalid type '{movement_type}'. Must be one of {sorted(VALID_FUND_TYPES)}"
            )
        if "date" in fields and fields["date"] is not None:
            self._require_date(fields, "date", errors)

        return self._result(errors, "fund_movement")

    def validate_template(self, fields: dict[str, Any]) -> ValidationResult:
        errors: list[str] = []
        self._require_text(fields, "name", errors)
        if "tags" in fields:
            self._validate_labels(fields["tags"], "tags", errors)
        return self._result(errors, "template")

    def validate_settings_patch(
        self, patch: SettingsPatch, current: JournalSettings
    ) -> ValidationResult:
        errors: list[str] = []

        if patch.theme is not None and patch.theme not in THEMES:
            errors.append(f"Invalid theme '{patch.theme}'. Must be one of {sorted(THEMES)}")
        if patch.fiscal_year_start is not None and not 1 <= patch.fiscal_year_start <= 12:
            errors.append(f"fiscal_year_start must be a month 1-12, got {patch.fiscal_year_start}")
        if patch.starting_balance is not None:
            if not current.is_first_launch:
                errors.append("starting_balance can only be set on first launch")
            elif patch.starting_balance <= 0:
                errors.append(f"starting_balance must be > 0, got {patch.starting_balance}")

        return self._result(errors, "settings")

    # --- helpers ---

    def _result(self, errors: list[str], entity: str) -> ValidationResult:
        valid = len(errors) == 0
        if not valid:
            logger.warning("entry_validation_failed", entity=entity, errors=errors)
        return ValidationResult(valid=valid, errors=errors)

    @staticmethod
    def _enum_value(value: Any) -> Any:
        return getattr(value, "value", value)

    def _require_text(self, fields: dict[str, Any], name: str, errors: list[str]) -> None:
        value = fields.get(name)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"{name} is required and cannot be empty")

    def _require_positive(self, fields: dict[str, Any], name: str, errors: list[str]) -> None:
        value = fields.get(name)
        if value is None or value == "":
            errors.append(f"{name} is required")
            return
        if isinstance(value, bool):
            errors.append(f"{name} must be a valid number, got '{value}'")
            return
        try:
            number = float(value)
        except (TypeError, ValueError):
            errors.append(f"{name} must be a valid number, got '{value}'")
            return
        if not math.isfinite(number):
            errors.append(f"{name} must be a finite number, got {value}")
        elif not number > 0:
            errors.append(f"{name} must be > 0, got {value}")

    def _require_date(self, fields: dict[str, Any], name: str, errors: list[str]) -> None:
        value = fields.get(name)
        if value is None or value == "":
            errors.append(f"{name} is required")
            return
        if isinstance(value, dt.date):
            return
        try:
            dt.date.fromisoformat(str(value))
        except ValueError:
            errors.append(f"{name} must be an ISO date (YYYY-MM-DD), got '{value}'")

    def _validate_sentiment(self, value: Any, errors: list[str]) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
            errors.append(f"sentiment must be an integer 1-5, got '{value}'")

    def _validate_labels(self, value: Any, name: str, errors: list[str]) -> None:
        if not isinstance(value, (list, tuple, set)) or not all(isinstance(v, str) for v in value):
            errors.append(f"{name} must be a list of strings")
