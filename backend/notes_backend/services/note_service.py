"""
Notes Backend: Note Service
==============================

What:  Reads and mutations of notes on behalf of an authenticated user.
How:   Receives the store and the caller's user id on every call; requests
       arrive already parsed (NoteCreate / NoteUpdate / NoteQuery).
Who:   Called by the /notes route handlers.

Ownership:
    Every lookup goes through `_get_owned_note`, which raises the same
    NotFoundError for "no such note" and "note belongs to someone else".
    The owner of a new note is always the authenticated user id; ids in the
    request body never reach this layer.
"""

import logging
from typing import List, Tuple

from notes_backend import utils
from notes_backend.exceptions import NotFoundError, StorageError
from notes_backend.models import Note
from notes_backend.schemas.note import NoteCreate, NoteQuery, NoteUpdate, PageMeta
from notes_backend.services.note_query import query_notes
from notes_backend.store import JsonStore

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes(): filtered, searched, paginated listing
        - get_note(): single note with ownership check
        - create_note() / update_note() / delete_note(): mutations, each
          persisted by the store before returning
    """

    def list_notes(
        self,
        store: JsonStore,
        user_id: str,
        query: NoteQuery,
    ) -> Tuple[List[Note], PageMeta]:
        notes, meta = query_notes(store.notes_for_user(user_id), user_id, query)
        logger.debug(
            "Listed %d/%d notes for user %s (page %d)",
            len(notes),
            meta.total,
            user_id,
            meta.page,
        )
        return notes, meta

    def get_note(self, store: JsonStore, user_id: str, note_id: str) -> Note:
        return self._get_owned_note(store, user_id, note_id)

    async def create_note(self, store: JsonStore, user_id: str, data: NoteCreate) -> Note:
        now = utils.utcnow()
        note = Note(
            id=utils.generate_id(),
            user_id=user_id,
            title=data.title,
            content=data.content,
            tags=data.tags,
            pinned=data.pinned,
            archived=data.archived,
            created_at=now,
            updated_at=now,
        )
        await store.add_note(note)
        logger.info("Note %s created by user %s", note.id, user_id)
        return note

    async def update_note(
        self,
        store: JsonStore,
        user_id: str,
        note_id: str,
        data: NoteUpdate,
    ) -> Note:
        """
        Apply the fields present in `data` and refresh updated_at.

        An update with no fields still refreshes updated_at.

        Raises:
            NotFoundError: note missing or owned by another user (→ 404)
            StorageError:  the store lost the note between check and write (→ 500)
        """
        self._get_owned_note(store, user_id, note_id)

        changes = data.changes()
        changes["updated_at"] = utils.utcnow()

        updated = await store.update_note(note_id, changes)
        if updated is None:
            logger.error("Note %s vanished during update", note_id)
            raise StorageError("Failed to update note", context={"note_id": note_id})

        logger.info("Note %s updated (%s)", note_id, ", ".join(sorted(changes)))
        return updated

    async def delete_note(self, store: JsonStore, user_id: str, note_id: str) -> str:
        """
        Remove an owned note and return its id.

        Raises:
            NotFoundError: note missing or owned by another user (→ 404)
            StorageError:  the store reported no removed row (→ 500)
        """
        self._get_owned_note(store, user_id, note_id)

        if not await store.delete_note(note_id):
            logger.error("Note %s passed the ownership check but was not deleted", note_id)
            raise StorageError("Failed to delete note", context={"note_id": note_id})

        logger.info("Note %s deleted by user %s", note_id, user_id)
        return note_id

    @staticmethod
    def _get_owned_note(store: JsonStore, user_id: str, note_id: str) -> Note:
        note = store.find_note(note_id)
        if note is None or not note.is_owned_by(user_id):
            raise NotFoundError(resource="note", resource_id=note_id)
        return note


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
