"""Per-user persistence of edited calendar days in the local cache."""
from __future__ import annotations

import json
import logging
import random
from typing import Dict, Optional

from pydantic import ValidationError

from fitfx_app.logging_config import get_logger, log_event
from logic.calendar_planner import MonthPlan, apply_override, plan_month
from logic.validation import CalendarSuggestionPayload
from models.calendar import CalendarSuggestion
from models.outfit_catalog import DEFAULT_CATALOG, OutfitCatalog
from tools.local_cache import KeyValueCache
from tools.observability import instrument_operation

LOGGER = get_logger(__name__)

OVERRIDE_KEY_PREFIX = "fitfx-calendar-custom"


class SaveFailed(RuntimeError):
    """The edited day could not be written to local storage."""


def override_key(user_id: str) -> str:
    if not user_id:
        raise ValueError("user_id is required")
    return f"{OVERRIDE_KEY_PREFIX}:{user_id}"


def decode_overrides(raw: Optional[str]) -> Dict[str, CalendarSuggestion]:
    """Parse a stored override map, dropping anything unreadable."""

    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("Stored calendar overrides are not valid JSON, starting empty")
        return {}
    if not isinstance(payload, dict):
        LOGGER.warning("Stored calendar overrides are not a map, starting empty")
        return {}

    overrides: Dict[str, CalendarSuggestion] = {}
    for date_string, entry in payload.items():
        if not isinstance(entry, dict):
            LOGGER.warning("Skipping calendar override for %s: not an object", date_string)
            continue
        try:
            suggestion = CalendarSuggestionPayload.model_validate(
                {"dateString": date_string, **entry}
            ).to_suggestion()
        except ValidationError as exc:
            LOGGER.warning("Skipping invalid calendar override for %s: %s", date_string, exc.error_count())
            continue
        if suggestion.date_string != date_string:
            LOGGER.warning("Skipping calendar override stored under mismatched key %s", date_string)
            continue
        overrides[date_string] = suggestion
    return overrides


def encode_overrides(overrides: Dict[str, CalendarSuggestion]) -> str:
    return json.dumps({key: value.to_document() for key, value in sorted(overrides.items())})


class CalendarOverrideStore:
    """Loads and saves a user's edited calendar days."""

    def __init__(self, cache: KeyValueCache) -> None:
        self.cache = cache

    def load_overrides(self, user_id: str) -> Dict[str, CalendarSuggestion]:
        key = override_key(user_id)
        try:
            raw = self.cache.get(key)
        except OSError:
            LOGGER.warning("Could not read calendar overrides, treating as empty", exc_info=True)
            return {}
        return decode_overrides(raw)

    @instrument_operation("save_calendar_override", expected=(SaveFailed,))
    def save_override(
        self, user_id: str, date_string: str, suggestion: CalendarSuggestion
    ) -> Dict[str, CalendarSuggestion]:
        """Store ``suggestion`` for ``date_string`` and return the full override map."""

        key = override_key(user_id)
        try:
            # A failed read must not be mistaken for an empty map and overwrite other days.
            existing = decode_overrides(self.cache.get(key))
        except OSError as exc:
            raise SaveFailed(f"Could not read saved calendar plans for {date_string}") from exc

        updated = apply_override(date_string, suggestion, existing)
        try:
            self.cache.set(key, encode_overrides(updated))
        except OSError as exc:
            raise SaveFailed(f"Could not save calendar plan for {date_string}") from exc
        log_event(
            LOGGER,
            logging.INFO,
            "calendar_override_saved",
            date=date_string,
            occasion=suggestion.occasion,
            style=suggestion.style,
            override_count=len(updated),
        )
        return updated


class CalendarPlanner:
    """Builds the month a user sees: fresh generation plus their saved edits."""

    def __init__(self, overrides: CalendarOverrideStore, catalog: OutfitCatalog | None = None) -> None:
        self.overrides = overrides
        self.catalog = catalog or DEFAULT_CATALOG

    @instrument_operation("plan_calendar_month")
    def month_plan(
        self, user_id: str, year: int, month: int, rng: Optional[random.Random] = None
    ) -> MonthPlan:
        return plan_month(year, month, self.catalog, self.overrides.load_overrides(user_id), rng=rng)

    def save_day(self, user_id: str, suggestion: CalendarSuggestion) -> Dict[str, CalendarSuggestion]:
        return self.overrides.save_override(user_id, suggestion.date_string, suggestion)


__all__ = [
    "CalendarOverrideStore",
    "CalendarPlanner",
    "OVERRIDE_KEY_PREFIX",
    "SaveFailed",
    "decode_overrides",
    "encode_overrides",
    "override_key",
]
