"""Monthly outfit calendar generation and override merging."""
from __future__ import annotations

import calendar
import logging
import random
from datetime import date
from typing import Dict, List, Mapping, Optional, Set

from models.calendar import (
    CASUAL,
    GENERATED_STYLES,
    PARTY,
    PROFESSIONAL,
    CalendarSuggestion,
)
from models.outfit_catalog import BucketKey, OutfitCatalog

logger = logging.getLogger(__name__)

MonthPlan = Dict[str, CalendarSuggestion]


def date_key(day: date) -> str:
    return day.isoformat()


def parse_date_key(date_string: str) -> date:
    """Validate a ``YYYY-MM-DD`` key and return the date it names."""

    try:
        parsed = date.fromisoformat(date_string)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid calendar date '{date_string}', expected YYYY-MM-DD") from exc
    if date_key(parsed) != date_string:
        raise ValueError(f"Invalid calendar date '{date_string}', expected YYYY-MM-DD")
    return parsed


def occasion_for_day(day: date) -> str:
    """Weekdays are Professional, Saturday is Party and Sunday is Casual."""

    weekday = day.weekday()
    if weekday < 5:
        return PROFESSIONAL
    if weekday == 5:
        return PARTY
    return CASUAL


def _draw_index(size: int, used: Set[int], rng: random.Random) -> int:
    if len(used) >= size:
        used.clear()
    available = [index for index in range(size) if index not in used]
    choice = rng.choice(available)
    used.add(choice)
    return choice


def generate_month(
    year: int,
    month: int,
    catalog: OutfitCatalog,
    rng: Optional[random.Random] = None,
) -> MonthPlan:
    """Assign a catalog outfit to every day of the month.

    Each (occasion, style) bucket hands out rows without repeats until it is
    exhausted, then starts a new cycle. Days whose bucket is empty get no
    entry. Pass a seeded ``random.Random`` for a reproducible month.
    """

    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    rng = rng or random.Random()
    _, days_in_month = calendar.monthrange(year, month)
    used_indices: Dict[BucketKey, Set[int]] = {}
    plan: MonthPlan = {}
    skipped: List[str] = []

    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        occasion = occasion_for_day(day)
        style = rng.choice(GENERATED_STYLES)
        rows = catalog.bucket(occasion, style)
        if not rows:
            skipped.append(date_key(day))
            continue

        used = used_indices.setdefault((occasion, style), set())
        row = rows[_draw_index(len(rows), used, rng)]
        plan[date_key(day)] = CalendarSuggestion.from_row(row, date_key(day), occasion, style)

    if skipped:
        logger.warning("No catalog rows for %s day(s) in %04d-%02d", len(skipped), year, month)
    logger.info("Generated %s calendar suggestions for %04d-%02d", len(plan), year, month)
    return plan


def merge_overrides(
    generated: Mapping[str, CalendarSuggestion], overrides: Mapping[str, CalendarSuggestion]
) -> MonthPlan:
    """Union of both maps where a saved override replaces the whole day."""

    return {**generated, **overrides}


def month_overrides(
    overrides: Mapping[str, CalendarSuggestion], year: int, month: int
) -> Dict[str, CalendarSuggestion]:
    prefix = f"{year:04d}-{month:02d}-"
    return {key: value for key, value in overrides.items() if key.startswith(prefix)}


def apply_override(
    date_string: str,
    suggestion: CalendarSuggestion,
    existing_overrides: Mapping[str, CalendarSuggestion],
) -> Dict[str, CalendarSuggestion]:
    """Return a copy of ``existing_overrides`` with the day set to ``suggestion``.

    The suggestion is stored exactly as given, including occasion and style
    values the generator never produces.
    """

    parse_date_key(date_string)
    if suggestion.date_string != date_string:
        raise ValueError(
            f"Suggestion is for {suggestion.date_string}, cannot store it under {date_string}"
        )
    updated = dict(existing_overrides)
    updated[date_string] = suggestion
    return updated


def plan_month(
    year: int,
    month: int,
    catalog: OutfitCatalog,
    overrides: Mapping[str, CalendarSuggestion] | None = None,
    rng: Optional[random.Random] = None,
) -> MonthPlan:
    """Freshly generated month with that month's saved overrides applied."""

    generated = generate_month(year, month, catalog, rng=rng)
    return merge_overrides(generated, month_overrides(overrides or {}, year, month))


__all__ = [
    "MonthPlan",
    "apply_override",
    "date_key",
    "generate_month",
    "merge_overrides",
    "month_overrides",
    "occasion_for_day",
    "parse_date_key",
    "plan_month",
]
