"""Per-user calendar override persistence."""

import json
import random
from pathlib import Path
from typing import Optional

import pytest

from models.calendar import FUSION, OTHER, CalendarSuggestion
from tools.calendar_overrides import (
    CalendarOverrideStore,
    CalendarPlanner,
    SaveFailed,
    decode_overrides,
    encode_overrides,
    override_key,
)
from tools.local_cache import InMemoryCache, JSONFileCache


class _FailingCache(InMemoryCache):
    def __init__(self, fail_reads: bool = False, fail_writes: bool = False) -> None:
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise OSError("disk unavailable")
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        super().set(key, value)


def _suggestion(date_string: str) -> CalendarSuggestion:
    return CalendarSuggestion(
        date_string=date_string,
        occasion=OTHER,
        style=FUSION,
        colour_combination="Teal, Cream",
        top="Linen shirt",
        bottom="Cream trousers",
        layer="None",
        shoes_accessories="Loafers",
    )


def test_override_key_is_user_scoped() -> None:
    assert override_key("user-1") == "fitfx-calendar-custom:user-1"
    with pytest.raises(ValueError):
        override_key("")


def test_save_and_load_roundtrip() -> None:
    store = CalendarOverrideStore(InMemoryCache())

    store.save_override("user-1", "2025-03-10", _suggestion("2025-03-10"))
    store.save_override("user-1", "2025-03-11", _suggestion("2025-03-11"))

    loaded = store.load_overrides("user-1")
    assert set(loaded) == {"2025-03-10", "2025-03-11"}
    assert loaded["2025-03-10"] == _suggestion("2025-03-10")


def test_users_do_not_see_each_others_overrides() -> None:
    store = CalendarOverrideStore(InMemoryCache())
    store.save_override("alice", "2025-03-10", _suggestion("2025-03-10"))

    assert store.load_overrides("bob") == {}


def test_corrupt_store_reads_as_empty() -> None:
    cache = InMemoryCache({override_key("user-1"): "{not json"})

    assert CalendarOverrideStore(cache).load_overrides("user-1") == {}
    assert decode_overrides("[1, 2]") == {}


def test_invalid_entries_are_dropped() -> None:
    stored = json.loads(encode_overrides({"2025-03-10": _suggestion("2025-03-10")}))
    stored["2025-03-11"] = "oops"
    stored["2025-03-12"] = {"occasion": "Party"}
    stored["2025-03-13"] = {**stored["2025-03-10"]}

    decoded = decode_overrides(json.dumps(stored))

    assert list(decoded) == ["2025-03-10"]


def test_unreadable_cache_loads_empty() -> None:
    assert CalendarOverrideStore(_FailingCache(fail_reads=True)).load_overrides("user-1") == {}


def test_write_failure_raises_save_failed() -> None:
    store = CalendarOverrideStore(_FailingCache(fail_writes=True))

    with pytest.raises(SaveFailed):
        store.save_override("user-1", "2025-03-10", _suggestion("2025-03-10"))


def test_read_failure_during_save_raises_save_failed() -> None:
    store = CalendarOverrideStore(_FailingCache(fail_reads=True))

    with pytest.raises(SaveFailed):
        store.save_override("user-1", "2025-03-10", _suggestion("2025-03-10"))


def test_json_file_cache_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "cache" / "local_cache.json"
    CalendarOverrideStore(JSONFileCache(path)).save_override(
        "user-1", "2025-03-10", _suggestion("2025-03-10")
    )

    reloaded = CalendarOverrideStore(JSONFileCache(path)).load_overrides("user-1")

    assert reloaded["2025-03-10"].style == FUSION


def test_planner_merges_saved_days() -> None:
    planner = CalendarPlanner(CalendarOverrideStore(InMemoryCache()))
    planner.save_day("user-1", _suggestion("2025-03-10"))

    plan = planner.month_plan("user-1", 2025, 3, rng=random.Random(11))
    other = planner.month_plan("user-2", 2025, 3, rng=random.Random(11))

    assert plan["2025-03-10"].occasion == OTHER
    assert other["2025-03-10"].occasion != OTHER
    assert len(plan) == 31
