"""Tests for InMemoryStore."""

import threading

import pytest

from mimir.memory import InMemoryStore, MemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    """Create an empty in-memory store."""
    return InMemoryStore()


class TestMemoryStoreCreate:
    """Tests for creating records."""

    def test_is_memory_store(self, store: InMemoryStore):
        """InMemoryStore implements the MemoryStore interface."""
        assert isinstance(store, MemoryStore)

    def test_create_returns_with_id(self, store: InMemoryStore):
        """create returns the record with an assigned id."""
        record = store.create("user's food preference", "prefers vegetarian food")
        assert record.id
        assert record.description == "user's food preference"
        assert record.content == "prefers vegetarian food"

    def test_create_sets_equal_timestamps(self, store: InMemoryStore):
        """created_at and updated_at are equal on a new record."""
        record = store.create("color", "blue")
        assert record.created_at == record.updated_at
        assert record.created_at.tzinfo is not None

    def test_ids_are_unique(self, store: InMemoryStore):
        """Every created record gets its own id."""
        ids = {store.create("d", f"content {i}").id for i in range(50)}
        assert len(ids) == 50


class TestMemoryStoreGet:
    """Tests for retrieving records."""

    def test_get_existing(self, store: InMemoryStore):
        """get returns the stored record."""
        record = store.create("color", "blue")
        assert store.get(record.id) == record

    def test_get_missing(self, store: InMemoryStore):
        """get returns None for an unknown id."""
        assert store.get("nope") is None

    def test_get_all_empty(self, store: InMemoryStore):
        """get_all returns empty list when no records."""
        assert store.get_all() == []

    def test_get_all_insertion_order(self, store: InMemoryStore):
        """get_all returns records in insertion order."""
        first = store.create("a", "one")
        second = store.create("b", "two")
        third = store.create("c", "three")
        assert [r.id for r in store.get_all()] == [first.id, second.id, third.id]


class TestMemoryStoreUpdate:
    """Tests for updating records."""

    def test_partial_update_content(self, store: InMemoryStore):
        """Updating content leaves description unchanged."""
        record = store.create("agent system prompt", "be helpful")
        updated = store.update(record.id, content="be helpful and private")

        assert updated is not None
        assert updated.description == "agent system prompt"
        assert updated.content == "be helpful and private"
        assert updated.created_at == record.created_at
        assert updated.updated_at > updated.created_at

    def test_partial_update_description(self, store: InMemoryStore):
        """Updating description leaves content unchanged."""
        record = store.create("old", "content")
        updated = store.update(record.id, description="new")
        assert updated.description == "new"
        assert updated.content == "content"

    def test_update_replaces_stored_record(self, store: InMemoryStore):
        """The stored record reflects the update, the old copy does not."""
        record = store.create("d", "old")
        store.update(record.id, content="new")
        assert store.get(record.id).content == "new"
        assert record.content == "old"

    def test_repeated_updates_move_forward(self, store: InMemoryStore):
        """updated_at strictly increases across back-to-back updates."""
        record = store.create("d", "c")
        first = store.update(record.id, content="c1")
        second = store.update(record.id, content="c2")
        assert second.updated_at > first.updated_at

    def test_update_missing_returns_none(self, store: InMemoryStore):
        """update returns None for an unknown id."""
        assert store.update("nope", content="x") is None


class TestMemoryStoreDelete:
    """Tests for deleting records."""

    def test_delete_existing(self, store: InMemoryStore):
        """delete removes the record and returns True."""
        record = store.create("d", "c")
        assert store.delete(record.id) is True
        assert store.get(record.id) is None
        assert store.get_all() == []

    def test_delete_missing(self, store: InMemoryStore):
        """delete returns False for an unknown id."""
        assert store.delete("nope") is False

    def test_delete_twice(self, store: InMemoryStore):
        """A second delete of the same id returns False."""
        record = store.create("d", "c")
        store.delete(record.id)
        assert store.delete(record.id) is False


class TestMemoryStoreSearch:
    """Tests for substring search."""

    def test_search_empty_store(self, store: InMemoryStore):
        """search returns empty list for an empty store."""
        assert store.search("food") == []

    def test_search_matches_description(self, store: InMemoryStore):
        """search matches on description."""
        record = store.create("user's food preference", "vegetarian")
        store.create("agent system prompt", "be helpful")
        assert store.search("food") == [record]

    def test_search_matches_content(self, store: InMemoryStore):
        """search matches on content."""
        record = store.create("preference", "The user prefers vegetarian FOOD.")
        assert store.search("vegetarian") == [record]

    def test_search_case_insensitive(self, store: InMemoryStore):
        """search ignores case on both sides."""
        record = store.create("Favorite Color", "BLUE")
        assert store.search("favorite color") == [record]
        assert store.search("blue") == [record]
        assert store.search("BlUe") == [record]

    def test_search_returns_all_matches_in_order(self, store: InMemoryStore):
        """search returns every match in insertion order."""
        first = store.create("pet", "a dog named Rex")
        store.create("city", "Paris")
        third = store.create("other pet", "a cat")
        assert store.search("pet") == [first, third]


class TestMemoryStoreConcurrency:
    """Tests for use across threads."""

    def test_concurrent_creates(self, store: InMemoryStore):
        """Creates from several threads are all kept."""

        def worker(n: int) -> None:
            for i in range(100):
                store.create(f"worker {n}", f"item {i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 400
