"""Stored records (users and notes) as they live in the JSON document."""

from notes_backend.models.note import Note
from notes_backend.models.user import User

__all__ = ["Note", "User"]
