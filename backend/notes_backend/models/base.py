"""
Notes Backend: Record Base Model
===================================

What:  Pydantic base class for every record kept in the JSON document.
How:   Python attributes are snake_case; the document and the API use
       camelCase keys (userId, createdAt, passwordHash) through an alias
       generator. Either spelling is accepted when loading. Records are
       frozen; changes go through `model_copy(update=...)` in the store.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_utc(value: datetime) -> datetime:
    """Naive timestamps (hand-edited data files) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_document(self) -> dict:
        """Serializes the record exactly as it is written to disk."""
        return self.model_dump(by_alias=True, mode="json")
