"""TradeTemplate Pydantic model."""

from pydantic import Field, field_validator

from trade_journal.models.base import JournalModel, new_id


class TradeTemplate(JournalModel):
    """Saved set of trade fields used to pre-fill new trades."""

    id: str = Field(default_factory=new_id)
    name: str
    setup: str = ""
    situation: str = ""
    tags: list[str] = []
    notes: str = ""

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, v: list[str]) -> list[str]:
        return sorted({t.strip() for t in v if t and t.strip()})

    def trade_fields(self) -> dict:
        """Non-empty template values keyed by trade field name."""
        fields = {
            "setup": self.setup,
            "situation": self.situation,
            "tags": list(self.tags),
            "notes": self.notes,
        }
        return {k: v for k, v in fields.items() if v}
