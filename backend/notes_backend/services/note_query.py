"""
Notes Backend: Notes Query Engine
====================================

What:  Filters, searches, sorts and paginates one user's notes.
How:   Pure functions over a sequence of Note records; no I/O, no store.
Who:   Called by NoteService.list_notes with the output of
       `JsonStore.notes_for_user`.

Pipeline (order matters):
    1. owner         note.user_id == user_id
    2. flags         pinned / archived, when specified
    3. tag           exact, case-sensitive membership
    4. search        case-insensitive substring of title, content or
                     the space-joined tags
    5. sort          updated_at descending; stable, so notes updated at the
                     same instant keep store insertion order
    6. paginate      total, total_pages = max(1, ceil(total / limit)),
                     slice [(page - 1) * limit, page * limit)
"""

import math
from typing import Iterable, List, Sequence, Tuple

from notes_backend.models import Note
from notes_backend.schemas.note import NoteQuery, PageMeta


def matches_search(note: Note, needle: str) -> bool:
    """`needle` must already be lower-cased."""
    return (
        needle in note.title.lower()
        or needle in note.content.lower()
        or needle in " ".join(note.tags).lower()
    )


def filter_notes(notes: Iterable[Note], user_id: str, query: NoteQuery) -> List[Note]:
    results = [n for n in notes if n.is_owned_by(user_id)]

    if query.pinned is not None:
        results = [n for n in results if n.pinned == query.pinned]
    if query.archived is not None:
        results = [n for n in results if n.archived == query.archived]

    if query.tag:
        results = [n for n in results if query.tag in n.tags]

    if query.q:
        needle = query.q.lower()
        results = [n for n in results if matches_search(n, needle)]

    return results


def sort_by_recent(notes: Iterable[Note]) -> List[Note]:
    # sorted() is stable with reverse=True: equal keys keep their input order
    return sorted(notes, key=lambda n: n.updated_at, reverse=True)


def paginate(items: Sequence[Note], page: int, limit: int) -> Tuple[List[Note], PageMeta]:
    total = len(items)
    total_pages = max(1, math.ceil(total / limit))
    offset = (page - 1) * limit
    meta = PageMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )
    return list(items[offset:offset + limit]), meta


def query_notes(
    notes: Iterable[Note],
    user_id: str,
    query: NoteQuery,
) -> Tuple[List[Note], PageMeta]:
    """
    Run the full pipeline. Never raises for a valid identity: no match is an
    empty page with total 0 and total_pages 1.
    """
    ordered = sort_by_recent(filter_notes(notes, user_id, query))
    return paginate(ordered, query.page, query.limit)
