"""Subscription record round-trips against the user document store."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Optional

from fitfx_app.logging_config import get_logger, log_event
from logic.entitlements import FeatureAccess, feature_access, features_status
from models.plans import validate_status
from models.subscription import SubscriptionRecord, Tier, utcnow
from tools.document_store import DocumentStore, DocumentStoreError
from tools.observability import instrument_operation

LOGGER = get_logger(__name__)


class SubscriptionService:
    """Reads and writes the ``subscription`` field of a user document."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def get_subscription(self, user_id: str) -> Optional[SubscriptionRecord]:
        """Return the stored record, ``None`` when absent.

        A store failure yields :meth:`SubscriptionRecord.unknown` so entitlement
        checks fall back to the free tier instead of failing.
        """

        try:
            document = self.store.get(user_id)
        except DocumentStoreError:
            log_event(
                LOGGER,
                logging.WARNING,
                "subscription_fetch_failed",
                user_id=user_id,
                exc_info=True,
            )
            return SubscriptionRecord.unknown()
        if not document or not isinstance(document.get("subscription"), dict):
            return None
        return SubscriptionRecord.from_document(document["subscription"])

    @instrument_operation("initialize_subscription")
    def initialize_subscription(self, user_id: str, now: datetime | None = None) -> SubscriptionRecord:
        record = SubscriptionRecord.free(now)
        self.store.set(
            user_id,
            {"subscription": record.to_document(), "hasSeenPlanModal": False},
            merge=True,
        )
        return record

    @instrument_operation("update_subscription_tier")
    def update_subscription_tier(
        self,
        user_id: str,
        tier: Tier,
        end_date: datetime | None = None,
        payment_id: str | None = None,
        order_id: str | None = None,
        now: datetime | None = None,
    ) -> SubscriptionRecord:
        """Record a successful payment: the whole record is replaced."""

        record = SubscriptionRecord(
            tier=tier,
            status="active",
            start_date=now or utcnow(),
            end_date=end_date,
            payment_id=payment_id,
            order_id=order_id,
        )
        fields = {"subscription": record.to_document(), "hasSeenPlanModal": True}
        # update() replaces the subscription field outright; a merging set() would keep an old endDate.
        if self.store.get(user_id) is None:
            self.store.set(user_id, fields)
        else:
            self.store.update(user_id, fields)
        log_event(LOGGER, logging.INFO, "subscription_upgraded", user_id=user_id, tier=tier.value)
        return record

    @instrument_operation("cancel_subscription")
    def cancel_subscription(self, user_id: str, now: datetime | None = None) -> SubscriptionRecord:
        record = SubscriptionRecord(tier=Tier.FREE, status="cancelled", start_date=now or utcnow())
        self.store.update(user_id, {"subscription": record.to_document()})
        return record

    @instrument_operation("update_subscription_status")
    def update_subscription_status(self, user_id: str, status: str) -> None:
        self.store.update(user_id, {"subscription.status": validate_status(status)})

    def features_status(self, user_id: str, now: datetime | None = None) -> Dict[str, object]:
        return features_status(self.get_subscription(user_id), now)

    def can_access_feature(self, user_id: str, feature: str, now: datetime | None = None) -> FeatureAccess:
        return feature_access(self.get_subscription(user_id), feature, now)


__all__ = ["SubscriptionService"]
