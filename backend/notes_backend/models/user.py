"""
Notes Backend: User Record
=============================

What:  A registered account.
When:  Created at registration; never updated or deleted afterwards.

The bcrypt digest lives only here. Responses are built from the `UserPublic`
and `CurrentUser` schemas, which do not have a password field.
"""

from datetime import datetime

from pydantic import field_validator

from notes_backend.models.base import Record, ensure_utc


class User(Record):
    id: str
    email: str
    password_hash: str
    name: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
