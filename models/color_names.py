"""Color name to hex lookups used when rendering swatches."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

FALLBACK_HEX = "#808080"

COLOR_NAME_TO_HEX: Dict[str, str] = {
    "white": "#FFFFFF",
    "black": "#000000",
    "red": "#FF0000",
    "blue": "#0000FF",
    "green": "#008000",
    "yellow": "#FFFF00",
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "brown": "#8B4513",
    "grey": "#808080",
    "gray": "#808080",
    "beige": "#F5F5DC",
    "cream": "#FFFDD0",
    "ivory": "#FFFFF0",
    "navy blue": "#000080",
    "navy": "#000080",
    "sky blue": "#87CEEB",
    "light blue": "#ADD8E6",
    "royal blue": "#4169E1",
    "teal": "#008080",
    "turquoise": "#40E0D0",
    "indigo": "#4B0082",
    "maroon": "#800000",
    "burgundy": "#800020",
    "wine": "#722F37",
    "crimson": "#DC143C",
    "coral": "#FF7F50",
    "magenta": "#FF00FF",
    "hot pink": "#FF69B4",
    "rose": "#FF007F",
    "olive": "#808000",
    "olive green": "#6B8E23",
    "sage green": "#BCB88A",
    "sage": "#B2AC88",
    "emerald": "#50C878",
    "mint": "#98FF98",
    "lime": "#00FF00",
    "mustard": "#FFDB58",
    "gold": "#FFD700",
    "champagne": "#F7E7CE",
    "tan": "#D2B48C",
    "camel": "#C19A6B",
    "khaki": "#F0E68C",
    "lavender": "#E6E6FA",
    "violet": "#8F00FF",
    "plum": "#DDA0DD",
    "chocolate": "#D2691E",
    "coffee": "#6F4E37",
    "cognac": "#9A463D",
    "rust": "#B7410E",
    "terracotta": "#E2725B",
    "peach": "#FFE5B4",
    "nude": "#E3BC9A",
    "charcoal": "#36454F",
    "silver": "#C0C0C0",
    "slate": "#708090",
    "denim": "#1560BD",
}

# Longest names first so "navy blue" wins over "blue" in substring matches.
_NAMES_BY_LENGTH: List[str] = sorted(COLOR_NAME_TO_HEX, key=len, reverse=True)

_HEX_TO_NAME: Dict[str, str] = {}
for _name, _hex in COLOR_NAME_TO_HEX.items():
    _HEX_TO_NAME.setdefault(_hex.lower(), _name)

_WHITESPACE = re.compile(r"\s+")


def _normalise_name(name: Any) -> str:
    if not isinstance(name, str):
        return ""
    return _WHITESPACE.sub(" ", name).strip().lower()


def hex_for_name(name: Any) -> str:
    """Return the hex code for a color name, or the neutral gray fallback.

    Matching ignores case and extra whitespace. An exact table hit wins;
    otherwise the longest table name found inside ``name`` is used, so
    "dark navy blue stripes" still resolves to navy blue.
    """

    key = _normalise_name(name)
    if not key:
        return FALLBACK_HEX
    exact = COLOR_NAME_TO_HEX.get(key)
    if exact:
        return exact
    for candidate in _NAMES_BY_LENGTH:
        if candidate in key:
            return COLOR_NAME_TO_HEX[candidate]
    logger.debug("No hex match for color %r, using fallback", name)
    return FALLBACK_HEX


def name_for_hex(hex_code: Any) -> str:
    """Return a display name for a hex code, or the input unchanged."""

    if not isinstance(hex_code, str):
        return "" if hex_code is None else str(hex_code)
    name = _HEX_TO_NAME.get(hex_code.strip().lower())
    if not name:
        return hex_code
    return name[0].upper() + name[1:]


def swatches(colour_combination: str) -> List[Tuple[str, str]]:
    """Split a comma separated combination into ``(label, hex)`` pairs."""

    return [
        (part.strip(), hex_for_name(part))
        for part in (colour_combination or "").split(",")
        if part.strip()
    ]


__all__ = ["COLOR_NAME_TO_HEX", "FALLBACK_HEX", "hex_for_name", "name_for_hex", "swatches"]
