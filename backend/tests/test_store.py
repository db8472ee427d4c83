"""
Notes Backend: JSON Store Tests
==================================

What:  Tests for JsonStore loading, persistence and degradation.
How:   Real files under pytest's tmp_path; no mocks.

What we test:
    ✅ Missing file starts empty and creates the data directory
    ✅ Mutations are written with camelCase keys and meta.version
    ✅ A second store loads what the first one wrote
    ✅ Malformed files and invalid records are skipped, not fatal
    ✅ Unwritable locations keep serving from memory
    ✅ Duplicate email (any case) raises ConflictError
    ✅ Updates never touch id, userId or createdAt
"""

import json
from datetime import datetime, timezone

import pytest

from notes_backend.exceptions import ConflictError
from notes_backend.models import Note, User
from notes_backend.store import DOCUMENT_VERSION, JsonStore

NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_user(user_id="u1", email="alice@example.com"):
    return User(
        id=user_id,
        email=email,
        password_hash="$2b$04$notarealhash",
        name="alice",
        created_at=NOW,
    )


def make_note(note_id="n1", user_id="u1", **overrides):
    fields = dict(
        id=note_id,
        user_id=user_id,
        title="Groceries",
        content="milk, eggs",
        tags=["home"],
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(overrides)
    return Note(**fields)


class TestStoreLoad:
    """Tests for JsonStore.load()."""

    @pytest.mark.asyncio
    async def test_missing_file_starts_empty(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "store.json"
        store = JsonStore(path)
        await store.load()

        assert store.users == ()
        assert store.notes == ()
        assert path.parent.is_dir()

    @pytest.mark.asyncio
    async def test_malformed_file_starts_empty(self, data_file, caplog):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{ not json", encoding="utf-8")

        store = JsonStore(data_file)
        await store.load()

        assert store.notes == ()
        assert "Failed to read data file" in caplog.text

    @pytest.mark.asyncio
    async def test_top_level_array_is_rejected(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("[]", encoding="utf-8")

        store = JsonStore(data_file)
        await store.load()

        assert store.users == ()

    @pytest.mark.asyncio
    async def test_invalid_records_are_skipped(self, data_file):
        good = make_note().to_document()
        data_file.parent.mkdir(parents=True)
        data_file.write_text(
            json.dumps({"users": "nope", "notes": [good, {"id": "broken"}], "meta": {"version": 1}}),
            encoding="utf-8",
        )

        store = JsonStore(data_file)
        await store.load()

        assert store.users == ()
        assert [n.id for n in store.notes] == ["n1"]


class TestStorePersistence:
    """Tests for the write path."""

    @pytest.mark.asyncio
    async def test_document_layout(self, store, data_file):
        await store.add_user(make_user())
        await store.add_note(make_note())

        document = json.loads(data_file.read_text(encoding="utf-8"))

        assert document["meta"] == {"version": DOCUMENT_VERSION}
        assert document["users"][0]["passwordHash"] == "$2b$04$notarealhash"
        assert document["users"][0]["createdAt"].startswith("2024-03-01T09:30:00")
        assert set(document["notes"][0]) == {
            "id", "userId", "title", "content", "tags",
            "pinned", "archived", "createdAt", "updatedAt",
        }

    @pytest.mark.asyncio
    async def test_reload_round_trip(self, store, data_file):
        await store.add_user(make_user())
        await store.add_note(make_note(pinned=True))

        reloaded = JsonStore(data_file)
        await reloaded.load()

        assert reloaded.users == store.users
        assert reloaded.notes == store.notes
        assert reloaded.notes[0].created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_no_temp_file_left_behind(self, store, data_file):
        await store.add_note(make_note())
        assert sorted(p.name for p in data_file.parent.iterdir()) == ["store.json"]

    @pytest.mark.asyncio
    async def test_unwritable_location_keeps_memory_state(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = JsonStore(blocker / "store.json")
        await store.load()

        note = await store.add_note(make_note())

        assert store.find_note("n1") == note
        assert await store.flush() is False
        assert "running in-memory only" in caplog.text

    @pytest.mark.asyncio
    async def test_flush_writes_current_state(self, store, data_file):
        assert await store.flush() is True
        assert json.loads(data_file.read_text(encoding="utf-8"))["notes"] == []


class TestStoreUsers:

    @pytest.mark.asyncio
    async def test_find_user_by_email_ignores_case(self, store):
        user = await store.add_user(make_user())
        assert store.find_user_by_email("ALICE@Example.com") == user
        assert store.find_user_by_id("u1") == user
        assert store.find_user_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, store):
        await store.add_user(make_user())
        with pytest.raises(ConflictError):
            await store.add_user(make_user(user_id="u2", email="Alice@Example.COM"))
        assert len(store.users) == 1


class TestStoreNotes:

    @pytest.mark.asyncio
    async def test_notes_for_user_keeps_insertion_order(self, store):
        await store.add_note(make_note("a"))
        await store.add_note(make_note("b", user_id="u2"))
        await store.add_note(make_note("c"))

        assert [n.id for n in store.notes_for_user("u1")] == ["a", "c"]

    @pytest.mark.asyncio
    async def test_update_ignores_immutable_fields(self, store):
        await store.add_note(make_note())
        later = datetime(2024, 3, 2, tzinfo=timezone.utc)

        updated = await store.update_note("n1", {
            "title": "Renamed",
            "updated_at": later,
            "id": "hijacked",
            "user_id": "u2",
            "created_at": later,
        })

        assert updated.title == "Renamed"
        assert updated.updated_at == later
        assert updated.id == "n1"
        assert updated.user_id == "u1"
        assert updated.created_at == NOW
        assert store.find_note("n1") == updated

    @pytest.mark.asyncio
    async def test_update_unknown_note_returns_none(self, store):
        assert await store.update_note("missing", {"title": "x"}) is None

    @pytest.mark.asyncio
    async def test_delete(self, store, data_file):
        await store.add_note(make_note())

        assert await store.delete_note("n1") is True
        assert await store.delete_note("n1") is False
        assert json.loads(data_file.read_text(encoding="utf-8"))["notes"] == []
