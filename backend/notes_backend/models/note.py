"""
Notes Backend: Note Record
=============================

What:  A note owned by exactly one user.

Invariants:
    - user_id is set at creation and never reassigned
    - title is non-empty after trimming
    - updated_at == created_at at creation; refreshed on every mutation
"""

from datetime import datetime
from typing import List

from pydantic import Field, field_validator

from notes_backend.models.base import Record, ensure_utc


class Note(Record):
    id: str
    user_id: str
    title: str
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    pinned: bool = False
    archived: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
