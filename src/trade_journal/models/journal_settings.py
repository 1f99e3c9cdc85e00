"""JournalSettings, SettingsPatch Pydantic models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from trade_journal.models.base import JournalModel

if TYPE_CHECKING:
    from trade_journal.config import Settings

THEMES = {"dark", "light"}


class JournalSettings(JournalModel):
    starting_balance: float = 0.0
    default_setups: list[str] = []
    default_situations: list[str] = []
    default_tags: list[str] = []
    theme: str = "dark"
    is_first_launch: bool = True
    fiscal_year_start: int = Field(default=1, ge=1, le=12)

    @classmethod
    def from_config(cls, config: Settings) -> JournalSettings:
        """First-launch settings seeded from env configuration."""
        return cls(
            starting_balance=config.DEFAULT_STARTING_BALANCE,
            default_setups=list(config.DEFAULT_SETUPS),
            default_situations=list(config.DEFAULT_SITUATIONS),
            default_tags=list(config.DEFAULT_TAGS),
            theme=config.DEFAULT_THEME,
        )


class SettingsPatch(JournalModel):
    """Partial update applied by Ledger.update_settings()."""

    theme: str | None = None
    fiscal_year_start: int | None = None
    starting_balance: float | None = None
    add_setups: list[str] = []
    remove_setups: list[str] = []
    add_situations: list[str] = []
    remove_situations: list[str] = []
    add_tags: list[str] = []
    remove_tags: list[str] = []
