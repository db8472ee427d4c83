"""
Notes Backend: Notes Query Engine Tests
==========================================

What:  Filtering, search, ordering and pagination over plain Note lists,
       plus the lenient NoteQuery parsing that feeds them.
How:   Pure functions; no store, no event loop.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from notes_backend.models import Note
from notes_backend.schemas.note import NoteQuery
from notes_backend.services.note_query import query_notes

BASE = datetime(2024, 5, 1, tzinfo=timezone.utc)


def note(note_id, minutes=0, user_id="u1", **fields):
    stamp = BASE + timedelta(minutes=minutes)
    return Note(id=note_id, user_id=user_id, title=fields.pop("title", note_id),
                created_at=stamp, updated_at=stamp, **fields)


def ids(notes):
    return [n.id for n in notes]


class TestNoteQueryParsing:

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), (" YES ", True), ("1", True),
        ("false", False), ("No", False), ("0", False),
        ("maybe", None), ("", None), (None, None),
    ])
    def test_tri_state_flags(self, raw, expected):
        assert NoteQuery.model_validate({"pinned": raw}).pinned is expected

    @pytest.mark.parametrize("raw, expected", [
        (None, 1), ("3", 3), ("2abc", 2), ("0", 1), ("-4", 1), ("abc", 1),
    ])
    def test_page(self, raw, expected):
        assert NoteQuery.model_validate({"page": raw}).page == expected

    @pytest.mark.parametrize("raw, expected", [
        (None, 10), ("25", 25), ("0", 10), ("abc", 10), ("-5", 1), ("500", 100), ("7px", 7),
    ])
    def test_limit(self, raw, expected):
        assert NoteQuery.model_validate({"limit": raw}).limit == expected

    def test_blank_search_and_tag_mean_no_filter(self):
        query = NoteQuery.model_validate({"q": "", "tag": "   "})
        assert query.q is None
        assert query.tag is None

    def test_tag_is_trimmed(self):
        assert NoteQuery.model_validate({"tag": " work "}).tag == "work"


class TestFiltering:

    def test_only_owner_notes(self):
        notes = [note("a"), note("b", user_id="u2")]
        page, meta = query_notes(notes, "u1", NoteQuery())

        assert ids(page) == ["a"]
        assert meta.total == 1

    def test_pinned_and_archived(self):
        notes = [
            note("plain"),
            note("pinned", pinned=True),
            note("archived", archived=True),
            note("both", pinned=True, archived=True),
        ]

        pinned, _ = query_notes(notes, "u1", NoteQuery(pinned=True))
        active, _ = query_notes(notes, "u1", NoteQuery(archived=False))
        both, _ = query_notes(notes, "u1", NoteQuery(pinned=True, archived=True))

        assert set(ids(pinned)) == {"pinned", "both"}
        assert set(ids(active)) == {"plain", "pinned"}
        assert ids(both) == ["both"]

    def test_tag_is_exact_and_case_sensitive(self):
        notes = [note("work", tags=["work", "urgent"]), note("home", tags=["home"]),
                 note("upper", tags=["Work"]), note("prefix", tags=["workshop"])]

        page, _ = query_notes(notes, "u1", NoteQuery(tag="work"))

        assert ids(page) == ["work"]

    @pytest.mark.parametrize("needle", ["GROCER", "oat milk", "errand"])
    def test_search_matches_title_content_or_tags(self, needle):
        notes = [
            note("hit-title", title="Grocery list"),
            note("hit-content", content="buy OAT MILK"),
            note("hit-tags", tags=["home", "errands"]),
            note("miss", title="Quarterly report"),
        ]

        page, _ = query_notes(notes, "u1", NoteQuery(q=needle))

        assert "miss" not in ids(page)
        assert len(page) == 1

    def test_no_match_is_empty_page(self):
        page, meta = query_notes([note("a")], "u1", NoteQuery(q="zzz"))

        assert page == []
        assert meta.total == 0
        assert meta.total_pages == 1
        assert meta.has_next_page is False
        assert meta.has_prev_page is False


class TestOrderingAndPagination:

    def test_most_recently_updated_first(self):
        notes = [note("old", 0), note("new", 10), note("mid", 5)]
        page, _ = query_notes(notes, "u1", NoteQuery())
        assert ids(page) == ["new", "mid", "old"]

    def test_ties_keep_insertion_order(self):
        notes = [note("first", 3), note("second", 3), note("older", 1)]
        page, _ = query_notes(notes, "u1", NoteQuery())
        assert ids(page) == ["first", "second", "older"]

    def test_second_page_of_one(self):
        notes = [note("c", 0), note("a", 2), note("b", 1)]

        page, meta = query_notes(notes, "u1", NoteQuery(page=2, limit=1))

        assert ids(page) == ["b"]
        assert meta.has_next_page is True
        assert meta.has_prev_page is True
        assert meta.total_pages == 3

    @pytest.mark.parametrize("total, limit", [(0, 10), (1, 1), (7, 3), (10, 5), (23, 10)])
    def test_pages_partition_the_result(self, total, limit):
        notes = [note(f"n{i}", i) for i in range(total)]
        _, meta = query_notes(notes, "u1", NoteQuery(limit=limit))

        assert meta.total == total
        assert meta.total_pages == max(1, math.ceil(total / limit))

        seen = []
        for page_number in range(1, meta.total_pages + 1):
            page, _ = query_notes(notes, "u1", NoteQuery(page=page_number, limit=limit))
            assert len(page) <= limit
            seen.extend(ids(page))
        assert sorted(seen) == sorted(ids(notes))

    def test_page_past_the_end_is_empty(self):
        page, meta = query_notes([note("a")], "u1", NoteQuery(page=5))

        assert page == []
        assert meta.page == 5
        assert meta.has_next_page is False
        assert meta.has_prev_page is True
