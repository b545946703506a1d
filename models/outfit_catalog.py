"""Static occasion/style outfit catalog used by the calendar planner."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from models.calendar import (
    AMERICAN,
    CASUAL,
    INDIAN,
    OUTFIT_FIELD_KEYS,
    PARTY,
    PROFESSIONAL,
    OutfitRow,
)

logger = logging.getLogger(__name__)

BucketKey = Tuple[str, str]


def _bucket_key(occasion: str, style: str) -> BucketKey:
    return occasion.strip().lower(), style.strip().lower()


def row_from_mapping(raw: Mapping[str, Any]) -> OutfitRow:
    """Read a catalog row keyed either by web labels or by attribute names."""

    values: Dict[str, str] = {}
    missing = []
    for name, label in OUTFIT_FIELD_KEYS.items():
        value = raw.get(label, raw.get(name))
        if value is None:
            missing.append(label)
        else:
            values[name] = str(value)
    if missing:
        raise ValueError(f"Missing outfit fields: {missing}")
    return OutfitRow(**values)


class OutfitCatalog:
    """Outfit rows grouped into (occasion, style) buckets."""

    def __init__(self, buckets: Mapping[BucketKey, Iterable[OutfitRow]] | None = None) -> None:
        self._buckets: Dict[BucketKey, List[OutfitRow]] = {}
        for (occasion, style), rows in (buckets or {}).items():
            self._buckets[_bucket_key(occasion, style)] = list(rows)

    def bucket(self, occasion: str, style: str) -> List[OutfitRow]:
        """Rows for the pair; an unknown pair is an empty bucket."""

        return list(self._buckets.get(_bucket_key(occasion, style), []))

    def bucket_keys(self) -> List[BucketKey]:
        return sorted(self._buckets)

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._buckets.values())

    @classmethod
    def from_dict(cls, payload: Mapping[str, Mapping[str, Iterable[Mapping[str, Any]]]]) -> "OutfitCatalog":
        """Build from the nested ``{occasion: {style: [row, ...]}}`` layout."""

        buckets: Dict[BucketKey, List[OutfitRow]] = {}
        for occasion, styles in payload.items():
            if not isinstance(styles, Mapping):
                raise ValueError(f"Catalog occasion '{occasion}' must map styles to rows")
            for style, rows in styles.items():
                buckets[_bucket_key(occasion, style)] = [row_from_mapping(row) for row in rows]
        return cls(buckets)

    @classmethod
    def load(cls, path: str | Path) -> "OutfitCatalog":
        catalog = cls.from_dict(json.loads(Path(path).read_text()))
        logger.info("Loaded outfit catalog from %s with %s rows", path, len(catalog))
        return catalog

    def to_dict(self) -> Dict[str, Dict[str, List[Dict[str, str]]]]:
        payload: Dict[str, Dict[str, List[Dict[str, str]]]] = {}
        for (occasion, style), rows in self._buckets.items():
            payload.setdefault(occasion, {})[style] = [row.to_document() for row in rows]
        return payload


def _rows(*entries: Tuple[str, str, str, str, str]) -> List[OutfitRow]:
    return [OutfitRow(*entry) for entry in entries]


DEFAULT_BUCKETS: Dict[BucketKey, List[OutfitRow]] = {
    (PROFESSIONAL, AMERICAN): _rows(
        ("Navy, White, Tan", "White oxford shirt", "Navy tailored trousers", "Navy blazer", "Tan loafers, brown belt"),
        ("Charcoal, Light Blue, Black", "Light blue poplin shirt", "Charcoal wool trousers", "Charcoal suit jacket", "Black derby shoes, silver watch"),
        ("Beige, White, Brown", "White knit polo", "Beige chinos", "Camel cardigan", "Brown brogues, leather strap watch"),
        ("Grey, Burgundy, Black", "Burgundy fine-knit sweater", "Grey flannel trousers", "Grey overcoat", "Black chelsea boots"),
        ("Olive, Cream, Brown", "Cream button-down shirt", "Olive chinos", "Brown suede jacket", "Brown loafers, woven belt"),
    ),
    (PROFESSIONAL, INDIAN): _rows(
        ("Ivory, Gold, Tan", "Ivory cotton kurta", "Churidar", "Gold nehru jacket", "Tan mojaris"),
        ("Navy, White, Silver", "White linen kurta", "Navy straight pants", "Navy bandhgala", "Black juttis, silver cufflinks"),
        ("Sage, Cream, Brown", "Sage silk-blend kurta", "Cream pyjama", "Cream waistcoat", "Brown kolhapuris"),
        ("Maroon, Beige, Gold", "Beige chanderi kurta", "Beige trousers", "Maroon nehru jacket", "Gold-toned juttis"),
    ),
    (PARTY, AMERICAN): _rows(
        ("Black, Silver", "Black satin shirt", "Black slim trousers", "Velvet blazer", "Patent shoes, silver chain"),
        ("Burgundy, Black, Gold", "Burgundy knit polo", "Black trousers", "Black leather jacket", "Chelsea boots, gold ring"),
        ("White, Denim, Tan", "White linen shirt", "Dark denim jeans", "Tan suede jacket", "White sneakers, aviators"),
    ),
    (PARTY, INDIAN): _rows(
        ("Emerald, Gold", "Emerald silk kurta", "Gold churidar", "Embroidered shawl", "Embellished juttis"),
        ("Pink, Ivory, Gold", "Pink brocade kurta", "Ivory dhoti pants", "Ivory sherwani jacket", "Gold mojaris, brooch"),
        ("Black, Gold", "Black velvet kurta", "Black pyjama", "Gold nehru jacket", "Black juttis, pocket square"),
    ),
    (CASUAL, AMERICAN): _rows(
        ("White, Denim, Olive", "White crew-neck tee", "Light-wash jeans", "Olive overshirt", "White sneakers, canvas tote"),
        ("Grey, Black", "Grey hoodie", "Black joggers", "Denim jacket", "Running shoes, cap"),
        ("Navy, Khaki", "Navy striped tee", "Khaki shorts", "Chambray shirt", "Boat shoes, sunglasses"),
    ),
    (CASUAL, INDIAN): _rows(
        ("Mustard, White", "Mustard short kurta", "White jeans", "Light cotton scarf", "Kolhapuris"),
        ("Blue, Cream", "Indigo block-print kurta", "Cream chinos", "Sleeveless jacket", "Tan sandals"),
        ("Peach, Beige", "Peach linen kurta", "Beige pyjama", "Cotton stole", "Brown juttis"),
    ),
}

DEFAULT_CATALOG = OutfitCatalog(DEFAULT_BUCKETS)


__all__ = ["DEFAULT_CATALOG", "OutfitCatalog", "row_from_mapping"]
