"""Model package exports."""

from models.calendar import CalendarSuggestion, OutfitRow
from models.color_names import hex_for_name, name_for_hex
from models.subscription import UNLIMITED, Finite, SubscriptionRecord, Tier, Unlimited
from models.wardrobe_item import WardrobeItem, from_document

__all__ = [
    "CalendarSuggestion",
    "Finite",
    "OutfitRow",
    "SubscriptionRecord",
    "Tier",
    "UNLIMITED",
    "Unlimited",
    "WardrobeItem",
    "from_document",
    "hex_for_name",
    "name_for_hex",
]
