"""Shared base for persisted journal records."""

import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return f"id-{uuid.uuid4().hex[:12]}"


class JournalModel(BaseModel):
    """Snake_case in Python, camelCase in the persisted document."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
