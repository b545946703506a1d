"""Wardrobe add/edit/delete with tier limits."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from models.subscription import SubscriptionRecord, Tier
from tools.document_store import InMemoryDocumentStore
from tools.subscription_tools import SubscriptionService
from tools.wardrobe_tools import WardrobeLimitReached, WardrobeService

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def _service(store: InMemoryDocumentStore | None = None) -> WardrobeService:
    return WardrobeService(store or InMemoryDocumentStore())


def _fill(service: WardrobeService, user_id: str, count: int) -> list:
    return [service.add_item(user_id, {"color": f"Color {index}"}, now=NOW) for index in range(count)]


def test_first_item_creates_free_document() -> None:
    store = InMemoryDocumentStore()
    item = _service(store).add_item("user-1", {"color": " Navy ", "imageUrl": "https://cdn/x.png"}, now=NOW)

    document = store.get("user-1")
    assert item.color == "Navy"
    assert item.id.startswith("garment-")
    assert item.uploaded_at == NOW.isoformat()
    assert document["wardrobe"][0]["imageUrl"] == "https://cdn/x.png"
    assert document["subscription"]["tier"] == "free"


def test_free_tier_stops_at_five() -> None:
    service = _service()
    _fill(service, "user-1", 5)

    with pytest.raises(WardrobeLimitReached) as excinfo:
        service.add_item("user-1", {"color": "Red"}, now=NOW)

    assert excinfo.value.status.total == 5
    assert len(service.load_wardrobe("user-1")) == 5


def test_missing_color_is_rejected() -> None:
    with pytest.raises(ValidationError):
        _service().add_item("user-1", {"material": "Cotton"}, now=NOW)
    with pytest.raises(ValidationError):
        _service().add_item("user-1", {"color": "   "}, now=NOW)


def test_duplicate_client_id_is_reassigned() -> None:
    service = _service()
    first = service.add_item("user-1", {"id": "shirt", "color": "White"}, now=NOW)
    second = service.add_item("user-1", {"id": "shirt", "color": "Blue"}, now=NOW)

    assert first.id == "shirt"
    assert second.id != "shirt"


def test_expired_plus_hides_items_beyond_free_limit() -> None:
    store = InMemoryDocumentStore()
    service = _service(store)
    SubscriptionService(store).update_subscription_tier("user-1", Tier.PLUS, now=NOW)
    items = _fill(service, "user-1", 8)
    store.update(
        "user-1",
        {"subscription": SubscriptionRecord(tier=Tier.PLUS, end_date=NOW - timedelta(days=1)).to_document()},
    )

    status = service.get_status("user-1", now=NOW)

    assert (status.accessible, status.hidden_count, status.is_expired) == (5, 3, True)
    assert [item.id for item in service.accessible_items("user-1", now=NOW)] == [item.id for item in items[:5]]
    with pytest.raises(WardrobeLimitReached):
        service.add_item("user-1", {"color": "Red"}, now=NOW)


def test_update_item_by_id_keeps_identity() -> None:
    service = _service()
    items = _fill(service, "user-1", 3)

    updated = service.update_item("user-1", items[1].id, {"color": "Emerald", "imageUrl": "new.png"})

    assert updated.id == items[1].id
    assert updated.uploaded_at == items[1].uploaded_at
    assert updated.image_url == "new.png"
    stored = service.load_wardrobe("user-1")
    assert [item.color for item in stored] == ["Color 0", "Emerald", "Color 2"]


def test_update_unknown_item_returns_none() -> None:
    service = _service()
    _fill(service, "user-1", 1)

    assert service.update_item("user-1", "missing", {"color": "Red"}) is None
    assert service.update_item("nobody", "missing", {"color": "Red"}) is None


def test_delete_item_by_id() -> None:
    service = _service()
    items = _fill(service, "user-1", 3)

    assert service.delete_item("user-1", items[0].id) is True
    assert service.delete_item("user-1", items[0].id) is False
    assert [item.id for item in service.load_wardrobe("user-1")] == [item.id for item in items[1:]]


def test_legacy_items_without_ids_get_a_stable_id() -> None:
    store = InMemoryDocumentStore({"user-1": {"wardrobe": [{"color": "Red"}, {"material": "no color"}, "junk"]}})
    service = _service(store)

    first = service.load_wardrobe("user-1")
    second = service.load_wardrobe("user-1")

    assert len(first) == 1
    assert first[0].id.startswith("garment-")
    assert first[0].id == second[0].id
    assert first[0].uploaded_at == second[0].uploaded_at
    assert store.get("user-1")["wardrobe"][0]["id"] == first[0].id


def test_legacy_item_can_be_edited_and_deleted_by_loaded_id() -> None:
    store = InMemoryDocumentStore({"user-1": {"wardrobe": [{"color": "Red"}, {"color": "Blue"}]}})
    service = _service(store)
    red, blue = service.load_wardrobe("user-1")

    updated = service.update_item("user-1", red.id, {"material": "Silk"})

    assert updated is not None
    assert updated.material == "Silk"
    assert service.delete_item("user-1", blue.id) is True
    assert [item.id for item in service.load_wardrobe("user-1")] == [red.id]


def test_status_and_items_come_from_one_read() -> None:
    store = InMemoryDocumentStore({"user-1": {"wardrobe": [{"color": f"Color {index}"} for index in range(7)]}})

    items, status = _service(store).load_with_status("user-1", now=NOW)

    assert status.total == len(items) == 7
    assert status.accessible == 5


def test_load_without_user_is_empty() -> None:
    assert _service().load_wardrobe("") == []
