"""Subscription record persistence."""

from datetime import datetime, timedelta, timezone

import pytest

from models.subscription import SubscriptionRecord, Tier
from tools.document_store import DocumentStoreError, InMemoryDocumentStore
from tools.subscription_tools import SubscriptionService

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class _BrokenStore(InMemoryDocumentStore):
    def get(self, user_id: str):
        raise DocumentStoreError("offline")


def test_missing_subscription_is_none() -> None:
    store = InMemoryDocumentStore({"user-1": {"wardrobe": []}})

    assert SubscriptionService(store).get_subscription("user-1") is None
    assert SubscriptionService(store).get_subscription("nobody") is None


def test_fetch_failure_reads_as_unknown_free() -> None:
    service = SubscriptionService(_BrokenStore())

    record = service.get_subscription("user-1")

    assert record == SubscriptionRecord.unknown()
    assert service.features_status("user-1", NOW)["current_tier"] is Tier.FREE


def test_initialize_subscription_sets_free() -> None:
    store = InMemoryDocumentStore()

    SubscriptionService(store).initialize_subscription("user-1", now=NOW)

    document = store.get("user-1")
    assert document["subscription"]["tier"] == "free"
    assert document["hasSeenPlanModal"] is False


def test_upgrade_replaces_previous_record() -> None:
    store = InMemoryDocumentStore()
    service = SubscriptionService(store)
    service.update_subscription_tier("user-1", Tier.PLUS, end_date=NOW + timedelta(days=30), now=NOW)

    service.update_subscription_tier("user-1", Tier.PREMIUM, payment_id="pay_1", order_id="order_1", now=NOW)

    stored = store.get("user-1")["subscription"]
    assert stored["tier"] == "premium"
    assert "endDate" not in stored
    assert stored["razorpayPaymentId"] == "pay_1"
    assert store.get("user-1")["hasSeenPlanModal"] is True


def test_cancel_drops_to_free() -> None:
    store = InMemoryDocumentStore()
    service = SubscriptionService(store)
    service.update_subscription_tier("user-1", Tier.PLUS, now=NOW)

    record = service.cancel_subscription("user-1", now=NOW)

    assert record.tier is Tier.FREE
    assert service.get_subscription("user-1").status == "cancelled"


def test_update_status_validates() -> None:
    store = InMemoryDocumentStore()
    service = SubscriptionService(store)
    service.initialize_subscription("user-1", now=NOW)

    service.update_subscription_status("user-1", "PAST_DUE")

    assert service.get_subscription("user-1").status == "past_due"
    with pytest.raises(ValueError):
        service.update_subscription_status("user-1", "paused")


def test_feature_access_uses_stored_tier() -> None:
    store = InMemoryDocumentStore()
    service = SubscriptionService(store)
    service.update_subscription_tier("user-1", Tier.PLUS, now=NOW)

    assert service.can_access_feature("user-1", "virtual-tryon", NOW).accessible
    assert not service.can_access_feature("user-1", "fabric-mixer", NOW).accessible
