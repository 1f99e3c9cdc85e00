"""Unit tests for EntryValidator."""

from __future__ import annotations

import datetime as dt

import pytest

from trade_journal.models.journal_settings import JournalSettings, SettingsPatch
from trade_journal.models.trade import DecisionAction
from trade_journal.validator import EntryValidator


@pytest.fixture
def validator() -> EntryValidator:
    return EntryValidator()


def _make_trade(**overrides) -> dict:
    defaults = {
        "symbol": "AAPL",
        "setup": "Breakout",
        "situation": "Trending",
        "initial_risk": 100,
    }
    defaults.update(overrides)
    return defaults


def _make_decision(**overrides) -> dict:
    defaults = {
        "date": "2025-01-15",
        "action": "Buy",
        "quantity": 10,
        "price": 150.0,
    }
    defaults.update(overrides)
    return defaults


# --- Trades ---


class TestTradeValidation:
    def test_valid_trade(self, validator: EntryValidator) -> None:
        result = validator.validate_trade(_make_trade())
        assert result.valid is True
        assert result.errors == []

    def test_numeric_string_risk(self, validator: EntryValidator) -> None:
        assert validator.validate_trade(_make_trade(initial_risk="75.5")).valid is True

    def test_boolean_risk_rejected(self, validator: EntryValidator) -> None:
        assert validator.validate_trade(_make_trade(initial_risk=True)).valid is False

    def test_partial_only_checks_supplied(self, validator: EntryValidator) -> None:
        assert validator.validate_trade({"notes": "x"}, partial=True).valid is True
        result = validator.validate_trade({"symbol": ""}, partial=True)
        assert result.valid is False
        assert any("symbol" in e for e in result.errors)

    @pytest.mark.parametrize("sentiment", [0, 6, "4", 2.5, True])
    def test_sentiment_range(self, validator: EntryValidator, sentiment) -> None:
        assert validator.validate_trade(_make_trade(sentiment=sentiment)).valid is False

    def test_tags_must_be_list(self, validator: EntryValidator) -> None:
        assert validator.validate_trade(_make_trade(tags="A+")).valid is False
        assert validator.validate_trade(_make_trade(tags=["A+", 3])).valid is False
        assert validator.validate_trade(_make_trade(tags=["A+"])).valid is True

    def test_bad_created_date(self, validator: EntryValidator) -> None:
        result = validator.validate_trade(_make_trade(created_date="15/01/2025"))
        assert result.valid is False
        assert any("created_date" in e for e in result.errors)


# --- Decisions ---


class TestDecisionValidation:
    def test_valid_decision(self, validator: EntryValidator) -> None:
        assert validator.validate_decision(_make_decision()).valid is True

    def test_enum_and_date_objects(self, validator: EntryValidator) -> None:
        result = validator.validate_decision(
            _make_decision(action=DecisionAction.SELL, date=dt.date(2025, 1, 15))
        )
        assert result.valid is True

    def test_lowercase_action_rejected(self, validator: EntryValidator) -> None:
        result = validator.validate_decision(_make_decision(action="buy"))
        assert result.valid is False
        assert any("action" in e for e in result.errors)

    def test_multiple_errors_collected(self, validator: EntryValidator) -> None:
        result = validator.validate_decision(
            {"action": "Short", "quantity": 0, "price": "abc"}
        )
        assert result.valid is False
        assert len(result.errors) == 4

    @pytest.mark.parametrize("field", ["quantity", "price"])
    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "inf"])
    def test_non_finite_rejected(self, validator: EntryValidator, field: str, value) -> None:
        result = validator.validate_decision(_make_decision(**{field: value}))
        assert result.valid is False
        assert any(field in e for e in result.errors)


# --- Fund movements ---


class TestFundMovementValidation:
    @pytest.mark.parametrize("movement_type", ["StartingBalance", "Addition", "Withdrawal"])
    def test_valid_types(self, validator: EntryValidator, movement_type: str) -> None:
        result = validator.validate_fund_movement({"type": movement_type, "amount": 10})
        assert result.valid is True

    def test_deposit_is_not_a_type(self, validator: EntryValidator) -> None:
        result = validator.validate_fund_movement({"type": "Deposit", "amount": 10})
        assert result.valid is False

    def test_infinite_amount_rejected(self, validator: EntryValidator) -> None:
        result = validator.validate_fund_movement({"type": "Addition", "amount": float("inf")})
        assert result.valid is False
        assert result.errors == ["amount must be a finite number, got inf"]

    def test_infinite_risk_rejected(self, validator: EntryValidator) -> None:
        assert validator.validate_trade(_make_trade(initial_risk=float("inf"))).valid is False


# --- Settings ---


class TestSettingsValidation:
    def test_starting_balance_after_first_launch(self, validator: EntryValidator) -> None:
        result = validator.validate_settings_patch(
            SettingsPatch(starting_balance=1000), JournalSettings(is_first_launch=False)
        )
        assert result.valid is False
        assert any("first launch" in e for e in result.errors)

    def test_non_positive_starting_balance(self, validator: EntryValidator) -> None:
        result = validator.validate_settings_patch(
            SettingsPatch(starting_balance=0), JournalSettings()
        )
        assert result.valid is False

    def test_vocabulary_patch_valid(self, validator: EntryValidator) -> None:
        result = validator.validate_settings_patch(
            SettingsPatch(add_setups=["Gap"], remove_tags=["FOMO"]), JournalSettings()
        )
        assert result.valid is True
