"""Authoritative collection of trades, fund movements, templates and settings."""

from __future__ import annotations

from typing import Any, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from trade_journal.config import Settings
from trade_journal.errors import FormatError, NotFoundError, ValidationError
from trade_journal.metrics_engine import recompute_trade
from trade_journal.models.funds import FundMovement, FundMovementType
from trade_journal.models.journal_settings import JournalSettings, SettingsPatch
from trade_journal.models.template import TradeTemplate
from trade_journal.models.trade import Decision, Trade
from trade_journal.validator import EntryValidator, ValidationResult

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

TRADE_INPUT_FIELDS = {
    "symbol",
    "setup",
    "situation",
    "tags",
    "initial_risk",
    "all_rules_followed",
    "created_date",
    "notes",
    "sentiment",
}
DECISION_INPUT_FIELDS = {"date", "action", "quantity", "price", "comments"}
FUND_INPUT_FIELDS = {"date", "amount", "type", "comments"}
TEMPLATE_INPUT_FIELDS = {"name", "setup", "situation", "tags", "notes"}

REQUIRED_DOCUMENT_KEYS = ("trades", "fundMovements")
DERIVED_TRADE_KEYS = {
    "status",
    "netQuantity",
    "netPnl",
    "rMultiple",
    "net_quantity",
    "net_pnl",
    "r_multiple",
}


def _pick(fields: dict[str, Any], allowed: set[str]) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if k in allowed and v is not None}


def _check(result: ValidationResult) -> None:
    if not result.valid:
        raise ValidationError(result.errors)


def _build(model_cls: type[ModelT], data: dict[str, Any]) -> ModelT:
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        raise ValidationError(errors) from exc


def _merge_labels(current: list[str], add: list[str], remove: list[str]) -> list[str]:
    merged = list(current)
    for label in add:
        label = label.strip()
        if label and label not in merged:
            merged.append(label)
    dropped = {label.strip() for label in remove}
    return [label for label in merged if label not in dropped]


def _settings_by_alias(raw: dict[str, Any]) -> dict[str, Any]:
    aliases = {name: field.alias or name for name, field in JournalSettings.model_fields.items()}
    return {aliases.get(key, key): value for key, value in raw.items()}


class Ledger:
    """
    Validated mutation of journal records.

    Every mutation validates its whole input before touching state, so a
    rejected call leaves the ledger unchanged. Derived trade fields are only
    written through recompute_trade() after each decision change.

    Returned records are the live stored models and are read-only for
    callers: change them through the Ledger methods. Assigning a derived
    trade field directly raises a pydantic ValidationError.

    A fresh ledger built from a config with DEFAULT_STARTING_BALANCE > 0
    records that balance as its StartingBalance movement and leaves first
    launch.
    """

    def __init__(
        self,
        settings: JournalSettings | None = None,
        config: Settings | None = None,
        validator: EntryValidator | None = None,
    ) -> None:
        self.config = config or Settings()
        self.validator = validator or EntryValidator()
        self._trades: list[Trade] = []
        self._fund_movements: list[FundMovement] = []
        self._templates: list[TradeTemplate] = []

        if settings is not None:
            self._settings = settings
            return
        self._settings = JournalSettings.from_config(self.config)
        if self.config.DEFAULT_STARTING_BALANCE > 0:
            self._settings.is_first_launch = False
            self._record_starting_balance(self.config.DEFAULT_STARTING_BALANCE)

    # --- read access ---

    @property
    def trades(self) -> list[Trade]:
        return list(self._trades)

    @property
    def fund_movements(self) -> list[FundMovement]:
        return list(self._fund_movements)

    @property
    def templates(self) -> list[TradeTemplate]:
        return list(self._templates)

    @property
    def settings(self) -> JournalSettings:
        return self._settings

    def get_trade(self, trade_id: str) -> Trade:
        for trade in self._trades:
            if trade.id == trade_id:
                return trade
        raise NotFoundError("Trade", trade_id)

    def get_template(self, template_id: str) -> TradeTemplate:
        for template in self._templates:
            if template.id == template_id:
                return template
        raise NotFoundError("Template", template_id)

    # --- trades ---

    def add_trade(self, fields: dict[str, Any]) -> Trade:
        """Create an open trade with no decisions. Caller supplies snake_case fields."""
        data = _pick(fields, TRADE_INPUT_FIELDS)
        _check(self.validator.validate_trade(data))

        trade = recompute_trade(_build(Trade, data))
        self._trades.append(trade)
        logger.info("trade_added", trade_id=trade.id, symbol=trade.symbol, setup=trade.setup)
        return trade

    def add_trade_from_template(self, template_id: str, fields: dict[str, Any]) -> Trade:
        """Template values fill in any trade field the caller leaves out."""
        template = self.get_template(template_id)
        data = {**template.trade_fields(), **_pick(fields, TRADE_INPUT_FIELDS)}
        return self.add_trade(data)

    def update_trade(self, trade_id: str, fields: dict[str, Any]) -> Trade:
        """Edit non-derived trade fields, then recompute."""
        trade = self.get_trade(trade_id)
        updates = _pick(fields, TRADE_INPUT_FIELDS)
        _check(self.validator.validate_trade(updates, partial=True))

        # Validated copy first; the stored trade is only touched after it builds.
        data = trade.model_dump()
        data.update(updates)
        candidate = _build(Trade, data)
        for name in updates:
            setattr(trade, name, getattr(candidate, name))

        recompute_trade(trade)
        logger.info("trade_updated", trade_id=trade_id, fields=sorted(updates))
        return trade

    def delete_trade(self, trade_id: str) -> None:
        index, _ = self._find_trade(trade_id)
        del self._trades[index]
        logger.info("trade_deleted", trade_id=trade_id)

    # --- decisions ---

    def add_decision(self, trade_id: str, decision: dict[str, Any] | Decision) -> Decision:
        """Append a buy/sell fill to a trade and recompute its derived fields."""
        trade = self.get_trade(trade_id)
        fields = decision.model_dump() if isinstance(decision, Decision) else decision
        data = _pick(fields, DECISION_INPUT_FIELDS)
        _check(self.validator.validate_decision(data))
        new_decision = _build(Decision, data)

        was_closed = trade.is_closed
        trade.decisions.append(new_decision)
        recompute_trade(trade)

        logger.info(
            "decision_added",
            trade_id=trade_id,
            action=new_decision.action.value,
            quantity=new_decision.quantity,
            price=new_decision.price,
        )
        self._log_transition(trade, was_closed)
        return new_decision

    def delete_decision(self, trade_id: str, decision_id: str) -> None:
        trade = self.get_trade(trade_id)
        for i, decision in enumerate(trade.decisions):
            if decision.id == decision_id:
                break
        else:
            raise NotFoundError("Decision", decision_id)

        was_closed = trade.is_closed
        del trade.decisions[i]
        recompute_trade(trade)
        logger.info("decision_deleted", trade_id=trade_id, decision_id=decision_id)
        self._log_transition(trade, was_closed)

    # --- fund movements ---

    def add_fund_movement(self, fields: dict[str, Any]) -> FundMovement:
        data = _pick(fields, FUND_INPUT_FIELDS)
        _check(self.validator.validate_fund_movement(data))

        movement = _build(FundMovement, data)
        self._fund_movements.append(movement)
        logger.info(
            "fund_movement_added",
            movement_id=movement.id,
            type=movement.type.value,
            amount=movement.amount,
        )
        return movement

    def delete_fund_movement(self, movement_id: str) -> None:
        for i, movement in enumerate(self._fund_movements):
            if movement.id == movement_id:
                del self._fund_movements[i]
                logger.info("fund_movement_deleted", movement_id=movement_id)
                return
        raise NotFoundError("FundMovement", movement_id)

    # --- settings ---

    def update_settings(self, patch: SettingsPatch | dict[str, Any]) -> JournalSettings:
        """
        Merge a settings patch. starting_balance is only accepted on first
        launch: it is recorded as a StartingBalance fund movement and ends
        the first-launch state.
        """
        if not isinstance(patch, SettingsPatch):
            patch = _build(SettingsPatch, patch)
        _check(self.validator.validate_settings_patch(patch, self._settings))

        updated = self._settings.model_copy(deep=True)
        if patch.theme is not None:
            updated.theme = patch.theme
        if patch.fiscal_year_start is not None:
            updated.fiscal_year_start = patch.fiscal_year_start
        updated.default_setups = _merge_labels(
            updated.default_setups, patch.add_setups, patch.remove_setups
        )
        updated.default_situations = _merge_labels(
            updated.default_situations, patch.add_situations, patch.remove_situations
        )
        updated.default_tags = _merge_labels(updated.default_tags, patch.add_tags, patch.remove_tags)

        if patch.starting_balance is not None:
            updated.is_first_launch = False

        self._settings = updated
        if patch.starting_balance is not None:
            self._record_starting_balance(patch.starting_balance)
        logger.info("settings_updated", fields=sorted(patch.model_dump(exclude_defaults=True)))
        return updated

    # --- templates ---

    def add_template(self, fields: dict[str, Any]) -> TradeTemplate:
        data = _pick(fields, TEMPLATE_INPUT_FIELDS)
        _check(self.validator.validate_template(data))

        template = _build(TradeTemplate, data)
        self._templates.append(template)
        logger.info("template_added", template_id=template.id, name=template.name)
        return template

    def delete_template(self, template_id: str) -> None:
        template = self.get_template(template_id)
        self._templates.remove(template)
        logger.info("template_deleted", template_id=template_id)

    # --- document ---

    def serialize(self) -> dict[str, Any]:
        """Full journal as a JSON-ready document with camelCase keys."""
        return {
            "trades": [t.to_document() for t in self._trades],
            "fundMovements": [m.to_document() for m in self._fund_movements],
            "settings": self._settings.to_document(),
            "templates": [t.to_document() for t in self._templates],
        }

    @classmethod
    def deserialize(cls, document: Any, config: Settings | None = None) -> Ledger:
        """Rebuild a ledger from a document. Derived trade fields are recomputed."""
        if not isinstance(document, dict):
            raise FormatError("Journal document must be a JSON object")
        missing = [k for k in REQUIRED_DOCUMENT_KEYS if k not in document]
        if missing:
            raise FormatError(f"Journal document missing required keys: {missing}")
        for key in (*REQUIRED_DOCUMENT_KEYS, "templates"):
            if key in document and not isinstance(document[key], list):
                raise FormatError(f"'{key}' must be a list")
        raw_settings = document.get("settings") or {}
        if not isinstance(raw_settings, dict):
            raise FormatError("'settings' must be an object")

        config = config or Settings()
        try:
            trades = [
                Trade.model_validate(
                    {k: v for k, v in raw.items() if k not in DERIVED_TRADE_KEYS}
                )
                for raw in document["trades"]
            ]
            movements = [FundMovement.model_validate(raw) for raw in document["fundMovements"]]
            templates = [TradeTemplate.model_validate(raw) for raw in document.get("templates", [])]
            settings_data = JournalSettings.from_config(config).to_document()
            # Without stored values, first launch and the balance follow the movements.
            starting = [m for m in movements if m.type == FundMovementType.STARTING_BALANCE]
            settings_data["isFirstLaunch"] = not starting
            settings_data["startingBalance"] = sum(m.amount for m in starting)
            settings_data.update(_settings_by_alias(raw_settings))
            settings = JournalSettings.model_validate(settings_data)
        except (PydanticValidationError, AttributeError) as exc:
            raise FormatError(f"Malformed journal record: {exc}") from exc

        for trade in trades:
            recompute_trade(trade)

        ledger = cls(settings=settings, config=config)
        ledger._trades = trades
        ledger._fund_movements = movements
        ledger._templates = templates
        logger.info(
            "ledger_loaded",
            trades=len(trades),
            fund_movements=len(movements),
            templates=len(templates),
        )
        return ledger

    # --- internals ---

    def _find_trade(self, trade_id: str) -> tuple[int, Trade]:
        for i, trade in enumerate(self._trades):
            if trade.id == trade_id:
                return i, trade
        raise NotFoundError("Trade", trade_id)

    def _record_starting_balance(self, amount: float) -> None:
        movement = FundMovement(
            amount=amount,
            type=FundMovementType.STARTING_BALANCE,
            comments="Starting balance",
        )
        self._settings.starting_balance = amount
        self._fund_movements.append(movement)
        logger.info("starting_balance_set", amount=amount)

    def _log_transition(self, trade: Trade, was_closed: bool) -> None:
        if trade.is_closed and not was_closed:
            logger.info(
                "trade_closed",
                trade_id=trade.id,
                symbol=trade.symbol,
                net_pnl=trade.net_pnl,
                r_multiple=trade.r_multiple,
            )
        elif was_closed and not trade.is_closed:
            logger.info("trade_reopened", trade_id=trade.id, net_quantity=trade.net_quantity)
