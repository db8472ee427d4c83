"""
Notes Backend: Notes Routes
==============================

What:  CRUD and search over the authenticated user's notes.
How:   Every route depends on `get_current_user`; the owner id passed to the
       service always comes from the token, never from the request.

Endpoints:
    GET    /notes              list (q, tag, pinned, archived, page, limit)
    POST   /notes              create (201)
    GET    /notes/{note_id}    fetch one
    PUT    /notes/{note_id}    partial update
    DELETE /notes/{note_id}    delete, returns {id}

A note owned by someone else answers 404 exactly like a missing one.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status

from notes_backend.dependencies import get_current_user, get_store, json_body
from notes_backend.models import Note
from notes_backend.schemas.auth import CurrentUser
from notes_backend.schemas.common import ErrorResponse, SuccessResponse, parse_payload
from notes_backend.schemas.note import (
    DeletedNote,
    NoteCreate,
    NoteListResponse,
    NoteQuery,
    NoteUpdate,
)
from notes_backend.services.note_service import note_service
from notes_backend.store import JsonStore

router = APIRouter(
    prefix="/notes",
    tags=["Notes"],
    responses={401: {"model": ErrorResponse}},
)

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get(
    "",
    response_model=NoteListResponse,
    summary="List notes with search, filters and pagination",
)
async def list_notes(
    q: Optional[str] = Query(default=None, description="Substring of title, content or tags"),
    tag: Optional[str] = Query(default=None, description="Exact tag (case-sensitive)"),
    pinned: Optional[str] = Query(default=None, description="true/false/1/0/yes/no"),
    archived: Optional[str] = Query(default=None, description="true/false/1/0/yes/no"),
    page: Optional[str] = Query(default=None, description="1-based page number"),
    limit: Optional[str] = Query(default=None, description="Page size, 1..100 (default 10)"),
    current_user: CurrentUser = Depends(get_current_user),
    store: JsonStore = Depends(get_store),
) -> NoteListResponse:
    # Raw strings: NoteQuery owns the lenient parsing and never rejects
    query = NoteQuery.model_validate({
        "q": q,
        "tag": tag,
        "pinned": pinned,
        "archived": archived,
        "page": page,
        "limit": limit,
    })
    notes, meta = note_service.list_notes(store, current_user.id, query)
    return NoteListResponse(data=notes, meta=meta)


@router.post(
    "",
    response_model=SuccessResponse[Note],
    status_code=status.HTTP_201_CREATED,
    summary="Create a note",
    responses={400: {"model": ErrorResponse}},
)
async def create_note(
    current_user: CurrentUser = Depends(get_current_user),
    payload: Any = Depends(json_body),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[Note]:
    data = parse_payload(NoteCreate, payload)
    note = await note_service.create_note(store, current_user.id, data)
    return SuccessResponse[Note](data=note)


@router.get(
    "/{note_id}",
    response_model=SuccessResponse[Note],
    summary="Get a single note",
    responses=NOT_FOUND,
)
async def get_note(
    note_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[Note]:
    note = note_service.get_note(store, current_user.id, note_id)
    return SuccessResponse[Note](data=note)


@router.put(
    "/{note_id}",
    response_model=SuccessResponse[Note],
    summary="Update fields of a note",
    responses={400: {"model": ErrorResponse}, **NOT_FOUND},
)
async def update_note(
    note_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    payload: Any = Depends(json_body),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[Note]:
    data = parse_payload(NoteUpdate, payload)
    note = await note_service.update_note(store, current_user.id, note_id, data)
    return SuccessResponse[Note](data=note)


@router.delete(
    "/{note_id}",
    response_model=SuccessResponse[DeletedNote],
    summary="Delete a note",
    responses=NOT_FOUND,
)
async def delete_note(
    note_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[DeletedNote]:
    deleted_id = await note_service.delete_note(store, current_user.id, note_id)
    return SuccessResponse[DeletedNote](data=DeletedNote(id=deleted_id))
