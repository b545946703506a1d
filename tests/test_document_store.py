"""User document store behaviour shared by both backends."""

from pathlib import Path

import pytest

from tools.document_store import DocumentStoreError, InMemoryDocumentStore, SQLiteDocumentStore


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return InMemoryDocumentStore()
    return SQLiteDocumentStore(tmp_path / "fitfx.db")


def test_missing_document_is_none(store) -> None:
    assert store.get("nobody") is None


def test_set_merges_nested_maps(store) -> None:
    store.set("user-1", {"subscription": {"tier": "plus", "endDate": "2025-01-01"}, "wardrobe": []})
    store.set("user-1", {"subscription": {"status": "active"}})

    document = store.get("user-1")
    assert document["subscription"] == {"tier": "plus", "endDate": "2025-01-01", "status": "active"}
    assert document["wardrobe"] == []


def test_set_without_merge_replaces(store) -> None:
    store.set("user-1", {"a": 1})
    store.set("user-1", {"b": 2}, merge=False)

    assert store.get("user-1") == {"b": 2}


def test_update_sets_dotted_paths(store) -> None:
    store.set("user-1", {"subscription": {"tier": "plus", "status": "active"}})

    store.update("user-1", {"subscription.status": "cancelled", "hasSeenPlanModal": True})

    document = store.get("user-1")
    assert document["subscription"] == {"tier": "plus", "status": "cancelled"}
    assert document["hasSeenPlanModal"] is True


def test_update_replaces_whole_field(store) -> None:
    store.set("user-1", {"subscription": {"tier": "plus", "endDate": "2025-01-01"}})

    store.update("user-1", {"subscription": {"tier": "premium"}})

    assert store.get("user-1")["subscription"] == {"tier": "premium"}


def test_update_requires_existing_document(store) -> None:
    with pytest.raises(KeyError):
        store.update("nobody", {"wardrobe": []})


def test_in_memory_store_returns_copies() -> None:
    store = InMemoryDocumentStore()
    store.set("user-1", {"wardrobe": [{"id": "a", "color": "Red"}]})

    store.get("user-1")["wardrobe"].clear()

    assert len(store.get("user-1")["wardrobe"]) == 1


def test_sqlite_store_wraps_corrupt_rows(tmp_path: Path) -> None:
    store = SQLiteDocumentStore(tmp_path / "fitfx.db")
    with store._connect() as conn:
        conn.execute("INSERT INTO user_documents (user_id, document) VALUES (?, ?)", ("user-1", "{broken"))

    with pytest.raises(DocumentStoreError):
        store.get("user-1")
