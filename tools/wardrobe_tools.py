"""Wardrobe list operations against the user document store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fitfx_app.logging_config import get_logger, log_event
from logic.entitlements import WardrobeStatus, accessible_items, can_add_item, wardrobe_status
from logic.validation import GarmentPayload, GarmentUpdate
from models.subscription import SubscriptionRecord, utcnow
from models.wardrobe_item import WardrobeItem, from_document
from tools.document_store import DocumentStore, DocumentStoreError
from tools.observability import instrument_operation
from tools.subscription_tools import SubscriptionService

LOGGER = get_logger(__name__)


class WardrobeLimitReached(RuntimeError):
    """The user's effective tier does not allow another item."""

    def __init__(self, status: WardrobeStatus) -> None:
        super().__init__(f"Wardrobe limit of {status.limit} items reached for tier {status.tier.value}")
        self.status = status


def _decode_items(raw_items: Any) -> Tuple[List[WardrobeItem], bool]:
    """Decode stored garments; the flag is set when any of them was missing an id or upload time."""

    items: List[WardrobeItem] = []
    backfilled = False
    for raw in raw_items or []:
        if not isinstance(raw, dict):
            LOGGER.warning("Skipping wardrobe entry that is not an object")
            continue
        try:
            items.append(from_document(raw))
        except ValueError as exc:
            LOGGER.warning("Skipping wardrobe entry due to validation error: %s", exc)
            continue
        if not raw.get("id") or not (raw.get("uploadedAt") or raw.get("uploaded_at")):
            backfilled = True
    return items, backfilled


def _position_of(items: List[WardrobeItem], item_id: str) -> Optional[int]:
    for position, item in enumerate(items):
        if item.id == item_id:
            return position
    return None


class WardrobeService:
    """Add, edit and delete garments by id while enforcing tier limits."""

    def __init__(self, store: DocumentStore, subscriptions: SubscriptionService | None = None) -> None:
        self.store = store
        self.subscriptions = subscriptions or SubscriptionService(store)

    def _read(self, user_id: str) -> Tuple[Optional[Dict[str, Any]], List[WardrobeItem]]:
        document = self.store.get(user_id)
        if document is None:
            return None, []
        items, backfilled = _decode_items(document.get("wardrobe"))
        if backfilled:
            # Ids assigned on read must be stored before they are handed out.
            self._write(user_id, items)
            log_event(LOGGER, logging.INFO, "wardrobe_ids_backfilled", user_id=user_id, item_count=len(items))
        return document, items

    def _write(self, user_id: str, items: List[WardrobeItem], now: datetime | None = None) -> None:
        self.store.update(
            user_id,
            {
                "wardrobe": [item.to_document() for item in items],
                "updatedAt": (now or utcnow()).isoformat(),
            },
        )

    def load_wardrobe(self, user_id: str) -> List[WardrobeItem]:
        """Items in stored order. An unreadable store reads as an empty wardrobe."""

        if not user_id:
            LOGGER.warning("No user_id provided to load_wardrobe")
            return []
        try:
            _, items = self._read(user_id)
        except DocumentStoreError:
            log_event(LOGGER, logging.ERROR, "wardrobe_load_failed", user_id=user_id, exc_info=True)
            return []
        return items

    def load_with_status(
        self, user_id: str, now: datetime | None = None
    ) -> Tuple[List[WardrobeItem], WardrobeStatus]:
        """One read of the wardrobe plus the status computed from that same list."""

        items = self.load_wardrobe(user_id)
        return items, wardrobe_status(self.subscriptions.get_subscription(user_id), items, now)

    def get_status(self, user_id: str, now: datetime | None = None) -> WardrobeStatus:
        return self.load_with_status(user_id, now)[1]

    def accessible_items(self, user_id: str, now: datetime | None = None) -> List[WardrobeItem]:
        items, status = self.load_with_status(user_id, now)
        return accessible_items(status, items)

    @instrument_operation("add_wardrobe_item", expected=(WardrobeLimitReached,))
    def add_item(self, user_id: str, item_data: Dict[str, Any], now: datetime | None = None) -> WardrobeItem:
        """Append a garment, creating the user document on first use.

        Raises :class:`WardrobeLimitReached` when the effective tier is full and
        :class:`pydantic.ValidationError` for an invalid payload.
        """

        if not user_id:
            raise ValueError("user_id is required")
        payload = GarmentPayload.model_validate(item_data)
        current = now or utcnow()
        document, items = self._read(user_id)
        record = self.subscriptions.get_subscription(user_id) if document is not None else None

        if not can_add_item(record, len(items), current):
            raise WardrobeLimitReached(wardrobe_status(record, items, current))

        item_data = payload.model_dump(exclude_none=True)
        if item_data.get("id") and _position_of(items, item_data["id"]) is not None:
            LOGGER.warning("Client supplied a wardrobe id that is already taken, assigning a new one")
            item_data.pop("id")
        item = from_document(item_data, now=current)
        if document is None:
            self.store.set(
                user_id,
                {
                    "wardrobe": [item.to_document()],
                    "subscription": SubscriptionRecord.free(current).to_document(),
                    "createdAt": current.isoformat(),
                    "updatedAt": current.isoformat(),
                },
            )
        else:
            self._write(user_id, [*items, item], current)
        log_event(LOGGER, logging.INFO, "wardrobe_item_added", user_id=user_id, item_count=len(items) + 1)
        return item

    @instrument_operation("update_wardrobe_item")
    def update_item(
        self, user_id: str, item_id: str, updated_fields: Dict[str, Any], now: datetime | None = None
    ) -> Optional[WardrobeItem]:
        """Replace fields on the item with ``item_id``; ``None`` when it is gone."""

        changes = GarmentUpdate.model_validate(updated_fields).changes()
        if changes.get("color", "") is None:
            changes.pop("color")
        document, items = self._read(user_id)
        position = _position_of(items, item_id)
        if document is None or position is None:
            return None

        existing = items[position]
        merged = {**existing.to_document(), **changes}
        merged["id"] = existing.id
        merged["uploadedAt"] = existing.uploaded_at
        if "image_url" in changes:
            merged["imageUrl"] = changes["image_url"]
        updated = from_document(merged)
        items[position] = updated
        self._write(user_id, items, now)
        return updated

    @instrument_operation("delete_wardrobe_item")
    def delete_item(self, user_id: str, item_id: str, now: datetime | None = None) -> bool:
        document, items = self._read(user_id)
        remaining = [item for item in items if item.id != item_id]
        if document is None or len(remaining) == len(items):
            return False
        self._write(user_id, remaining, now)
        return True


__all__ = ["WardrobeLimitReached", "WardrobeService"]
