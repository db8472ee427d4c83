"""
Notes Backend: JSON Document Store
=====================================

What:  In-memory mirror of one JSON document holding every user and note.
How:   `load()` reads the file once at startup; every mutation rewrites the
       whole document before returning. Writes go through aiofiles to a
       temporary file that then replaces the target.
Who:   Created by the application factory, attached to `app.state.store`,
       and handed to services by the `get_store` dependency.
When:  Loaded in the lifespan startup, flushed again on shutdown.

Document layout:
    {
        "users": [{"id", "email", "passwordHash", "name", "createdAt"}],
        "notes": [{"id", "userId", "title", "content", "tags", "pinned",
                   "archived", "createdAt", "updatedAt"}],
        "meta":  {"version": 1}
    }

Concurrency:
    One asyncio.Lock guards each read-modify-persist span, so mutations are
    applied and written one at a time. Reads take no lock and see the last
    committed in-memory state.

Durability:
    Persisting is best-effort. If the directory or file cannot be written the
    failure is logged and the request still succeeds; the process keeps
    serving from memory.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

import aiofiles
import aiofiles.os
from pydantic import ValidationError as PydanticValidationError

from notes_backend.exceptions import ConflictError
from notes_backend.models import Note, User
from notes_backend.models.base import Record

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 1

# Fields a note update may never touch
IMMUTABLE_NOTE_FIELDS = frozenset({"id", "user_id", "created_at"})

RecordT = TypeVar("RecordT", bound=Record)


def default_meta() -> Dict[str, Any]:
    return {"version": DOCUMENT_VERSION}


class JsonStore:
    """
    Process-wide owner of users and notes.

    Collections keep insertion order; the notes query engine relies on it to
    break ties between notes with identical `updatedAt`.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._users: List[User] = []
        self._notes: List[Note] = []
        self._meta: Dict[str, Any] = default_meta()
        self._lock = asyncio.Lock()

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def load(self) -> None:
        """
        Replace the in-memory state with the contents of the data file.

        A missing file leaves an empty document. An unreadable or malformed
        file is logged and also leaves an empty document. Records that fail
        validation are skipped one by one.
        """
        self._ensure_data_dir()
        self._users, self._notes, self._meta = [], [], default_meta()

        if not self.path.exists():
            logger.info("No data file at %s, starting with an empty store", self.path)
            return

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
            document = json.loads(raw)
            if not isinstance(document, dict):
                raise ValueError("top-level JSON value is not an object")
        except (OSError, ValueError) as e:
            logger.warning(
                "Failed to read data file %s, continuing with in-memory data: %s",
                self.path,
                e,
            )
            return

        self._users = self._parse_records(User, document.get("users"), "users")
        self._notes = self._parse_records(Note, document.get("notes"), "notes")
        meta = document.get("meta")
        self._meta = {**default_meta(), **meta} if isinstance(meta, dict) else default_meta()

        logger.info(
            "Loaded %d users and %d notes from %s",
            len(self._users),
            len(self._notes),
            self.path,
        )

    async def flush(self) -> bool:
        """Write the full document now. Returns False if the write failed."""
        async with self._lock:
            return await self._write()

    def snapshot(self) -> Dict[str, Any]:
        """The document exactly as it is written to disk."""
        return {
            "users": [user.to_document() for user in self._users],
            "notes": [note.to_document() for note in self._notes],
            "meta": dict(self._meta),
        }

    # ── Users ─────────────────────────────────────────────────────────────

    @property
    def users(self) -> Tuple[User, ...]:
        return tuple(self._users)

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        wanted = str(email).lower()
        return next((u for u in self._users if u.email.lower() == wanted), None)

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self._users if u.id == user_id), None)

    async def add_user(self, user: User) -> User:
        """
        Append a user and persist.

        The email is checked again inside the lock: two registrations for the
        same address can both pass the service-level check while the
        password is being hashed.
        """
        async with self._lock:
            if self.find_user_by_email(user.email) is not None:
                raise ConflictError(
                    "Email already registered",
                    context={"email": user.email},
                )
            self._users.append(user)
            await self._write()
        logger.info("User %s registered", user.id)
        return user

    # ── Notes ─────────────────────────────────────────────────────────────

    @property
    def notes(self) -> Tuple[Note, ...]:
        return tuple(self._notes)

    def find_note(self, note_id: str) -> Optional[Note]:
        return next((n for n in self._notes if n.id == note_id), None)

    def notes_for_user(self, user_id: str) -> List[Note]:
        """All notes owned by `user_id`, in insertion order."""
        return [n for n in self._notes if n.user_id == user_id]

    async def add_note(self, note: Note) -> Note:
        async with self._lock:
            self._notes.append(note)
            await self._write()
        return note

    async def update_note(self, note_id: str, changes: Dict[str, Any]) -> Optional[Note]:
        """
        Apply `changes` (snake_case field names) to a note and persist.

        Returns the updated note, or None if no note has that id.
        id, user_id and created_at are never changed.
        """
        changes = {k: v for k, v in changes.items() if k not in IMMUTABLE_NOTE_FIELDS}
        async with self._lock:
            for index, note in enumerate(self._notes):
                if note.id == note_id:
                    updated = note.model_copy(update=changes)
                    self._notes[index] = updated
                    await self._write()
                    return updated
        return None

    async def delete_note(self, note_id: str) -> bool:
        """Remove a note and persist. Returns whether a row was removed."""
        async with self._lock:
            before = len(self._notes)
            self._notes = [n for n in self._notes if n.id != note_id]
            changed = len(self._notes) != before
            if changed:
                await self._write()
        return changed

    # ── Internals ─────────────────────────────────────────────────────────

    def _ensure_data_dir(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Unable to ensure data directory %s: %s", self.path.parent, e)

    async def _write(self) -> bool:
        """Persist the document. Caller must hold the lock."""
        self._ensure_data_dir()
        payload = json.dumps(self.snapshot(), indent=2, ensure_ascii=False)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning(
                "Failed to write data file %s (running in-memory only): %s",
                self.path,
                e,
            )
            return False
        logger.debug("Persisted %d bytes to %s", len(payload), self.path)
        return True

    @staticmethod
    def _parse_records(model: Type[RecordT], raw: Any, collection: str) -> List[RecordT]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Ignoring '%s': expected a list, got %s", collection, type(raw).__name__)
            return []

        records: List[RecordT] = []
        for position, item in enumerate(raw):
            try:
                records.append(model.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(
                    "Skipping invalid %s record at position %d (%d validation errors)",
                    collection,
                    position,
                    e.error_count(),
                )
        return records
