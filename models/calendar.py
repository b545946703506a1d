"""Calendar outfit plan schemas."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

PROFESSIONAL = "Professional"
PARTY = "Party"
CASUAL = "Casual"
OTHER = "Other"

AMERICAN = "American"
INDIAN = "Indian"
FUSION = "Fusion"

# What the editor offers. Saved overrides may hold any of these.
OCCASIONS: List[str] = [PROFESSIONAL, PARTY, CASUAL, OTHER]
STYLES: List[str] = [AMERICAN, INDIAN, FUSION, OTHER]

# What the monthly generator draws from.
GENERATED_STYLES: List[str] = [AMERICAN, INDIAN]

# Attribute name -> key used by the web client when persisting a day.
OUTFIT_FIELD_KEYS: Dict[str, str] = {
    "colour_combination": "Colour Combination",
    "top": "T-Shirt/Shirt",
    "bottom": "Trousers/Bottom",
    "layer": "Jacket/Layer",
    "shoes_accessories": "Shoes & Accessories",
}


@dataclass(frozen=True)
class OutfitRow:
    """One row of the static outfit catalog."""

    colour_combination: str
    top: str
    bottom: str
    layer: str
    shoes_accessories: str

    def to_document(self) -> Dict[str, str]:
        return {OUTFIT_FIELD_KEYS[name]: value for name, value in asdict(self).items()}


@dataclass(frozen=True)
class CalendarSuggestion:
    """The outfit planned for a single calendar day."""

    date_string: str
    occasion: str
    style: str
    colour_combination: str
    top: str
    bottom: str
    layer: str
    shoes_accessories: str

    @classmethod
    def from_row(cls, row: OutfitRow, date_string: str, occasion: str, style: str) -> "CalendarSuggestion":
        return cls(date_string=date_string, occasion=occasion, style=style, **asdict(row))

    @property
    def colors(self) -> List[str]:
        return [part.strip() for part in self.colour_combination.split(",") if part.strip()]

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            OUTFIT_FIELD_KEYS[name]: getattr(self, name) for name in OUTFIT_FIELD_KEYS
        }
        document.update({"occasion": self.occasion, "style": self.style, "dateString": self.date_string})
        return document


__all__ = [
    "AMERICAN",
    "CASUAL",
    "CalendarSuggestion",
    "FUSION",
    "GENERATED_STYLES",
    "INDIAN",
    "OCCASIONS",
    "OTHER",
    "OUTFIT_FIELD_KEYS",
    "OutfitRow",
    "PARTY",
    "PROFESSIONAL",
    "STYLES",
]
