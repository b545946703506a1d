"""Wardrobe item (garment) data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from models.subscription import utcnow

# Document keys that differ from the attribute names.
_DOCUMENT_KEYS: Dict[str, str] = {
    "image_url": "imageUrl",
    "uploaded_at": "uploadedAt",
}
_OPTIONAL_TEXT_FIELDS = (
    "material",
    "type",
    "image",
    "image_url",
    "size",
    "occasion",
    "season",
    "condition",
    "notes",
)


def new_item_id() -> str:
    return f"garment-{uuid4().hex}"


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class WardrobeItem:
    """A garment in the user's ordered wardrobe list."""

    id: str
    color: str
    material: Optional[str] = None
    type: Optional[str] = None
    image: Optional[str] = None
    image_url: Optional[str] = None
    size: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None
    uploaded_at: Optional[str] = None

    def __post_init__(self) -> None:
        self.color = str(self.color or "").strip()
        if not self.color:
            raise ValueError("WardrobeItem requires a color")
        for name in _OPTIONAL_TEXT_FIELDS:
            setattr(self, name, _clean_text(getattr(self, name)))

    def to_document(self) -> Dict[str, Any]:
        """Serialise into the camelCase shape stored in the user document."""

        document: Dict[str, Any] = {"id": self.id, "color": self.color}
        for name in (*_OPTIONAL_TEXT_FIELDS, "uploaded_at"):
            value = getattr(self, name)
            if value is not None:
                document[_DOCUMENT_KEYS.get(name, name)] = value
        return document


def from_document(payload: Dict[str, Any], now: datetime | None = None) -> WardrobeItem:
    """Build a :class:`WardrobeItem` from a stored or submitted garment payload.

    Items stored before ids were assigned get one here so every later edit or
    delete can address them by id.
    """

    if not _clean_text(payload.get("color")):
        raise ValueError("Missing required fields for WardrobeItem: ['color']")

    fields: Dict[str, Any] = {}
    for name in _OPTIONAL_TEXT_FIELDS:
        fields[name] = payload.get(_DOCUMENT_KEYS.get(name, name), payload.get(name))

    uploaded_at = payload.get("uploadedAt") or payload.get("uploaded_at")
    return WardrobeItem(
        id=_clean_text(payload.get("id")) or new_item_id(),
        color=str(payload["color"]),
        uploaded_at=str(uploaded_at) if uploaded_at else (now or utcnow()).isoformat(),
        **fields,
    )


__all__ = ["WardrobeItem", "from_document", "new_item_id"]
