"""Error taxonomy for ledger mutations, lookups, simulation and document loading."""

from __future__ import annotations


class JournalError(Exception):
    """Base class for all recoverable journal errors."""


class ValidationError(JournalError, ValueError):
    """Malformed, missing or out-of-range input to a mutation."""

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(JournalError, LookupError):
    """Reference to a trade, decision, fund movement or template that does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class InsufficientDataError(JournalError):
    """Simulation requested with too few closed trades."""

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            f"Monte Carlo simulation needs at least {required} closed trades, got {available}"
        )


class FormatError(JournalError):
    """Persisted document is missing required structure."""
