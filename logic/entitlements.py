"""Tier, wardrobe limit and feature access rules.

Everything here works on data the caller already fetched. None of these
functions touch storage and none of them raise for odd records: a missing
record is the free tier and a lapsed paid tier is the free tier.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, TypeVar

from models.plans import (
    FEATURE_REQUIREMENTS,
    PLAN_LIMITS,
    TIER_DISPLAY_NAMES,
    TIER_RANK,
    WARDROBE_LIMITS,
    PlanLimits,
    validate_feature,
)
from models.subscription import Limit, SubscriptionRecord, Tier, as_utc, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WardrobeStatus:
    """How much of a stored wardrobe the effective tier lets the user see."""

    accessible: int
    total: int
    limit: Limit
    is_expired: bool
    tier: Tier
    stored_tier: Tier

    @property
    def hidden_count(self) -> int:
        return self.total - self.accessible

    @property
    def is_unlimited(self) -> bool:
        return self.limit.is_unlimited


@dataclass(frozen=True)
class FeatureAccess:
    accessible: bool
    required_tier: Tier
    tier_name: str


def _now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else utcnow()


def is_expired(record: Optional[SubscriptionRecord], now: datetime | None = None) -> bool:
    """True when the record carries an end date that has passed."""

    if record is None or record.end_date is None:
        return False
    return _now(now) > as_utc(record.end_date)


def effective_tier(record: Optional[SubscriptionRecord], now: datetime | None = None) -> Tier:
    """The tier actually in force once expiry is taken into account."""

    if record is None:
        return Tier.FREE
    if is_expired(record, now):
        return Tier.FREE
    return record.tier


def tier_limit(tier: Tier) -> Limit:
    return WARDROBE_LIMITS[tier]


def tier_display_name(tier: Tier) -> str:
    return TIER_DISPLAY_NAMES[tier]


def plan_limits(tier: Tier) -> PlanLimits:
    return PLAN_LIMITS[tier]


def wardrobe_status(
    record: Optional[SubscriptionRecord], items: Sequence[object], now: datetime | None = None
) -> WardrobeStatus:
    """Count visible and hidden wardrobe items under the effective tier."""

    current = _now(now)
    tier = effective_tier(record, current)
    limit = tier_limit(tier)
    stored_tier = record.tier if record is not None else Tier.FREE
    total = len(items)
    status = WardrobeStatus(
        accessible=limit.cap(total),
        total=total,
        limit=limit,
        is_expired=stored_tier is not Tier.FREE and is_expired(record, current),
        tier=tier,
        stored_tier=stored_tier,
    )
    logger.debug(
        "wardrobe status tier=%s total=%s accessible=%s expired=%s",
        tier.value,
        status.total,
        status.accessible,
        status.is_expired,
    )
    return status


def can_add_item(
    record: Optional[SubscriptionRecord], current_count: int, now: datetime | None = None
) -> bool:
    return tier_limit(effective_tier(record, now)).allows(current_count)


def feature_access(
    record: Optional[SubscriptionRecord], feature: str, now: datetime | None = None
) -> FeatureAccess:
    """Check one AI feature against the effective tier.

    Raises :class:`ValueError` for feature names that are not in the table.
    """

    required = FEATURE_REQUIREMENTS[validate_feature(feature)]
    current = effective_tier(record, now)
    return FeatureAccess(
        accessible=TIER_RANK[current] >= TIER_RANK[required],
        required_tier=required,
        tier_name=tier_display_name(required),
    )


def features_status(
    record: Optional[SubscriptionRecord], now: datetime | None = None
) -> Dict[str, object]:
    current = _now(now)
    status: Dict[str, object] = {
        feature: feature_access(record, feature, current) for feature in FEATURE_REQUIREMENTS
    }
    status["current_tier"] = effective_tier(record, current)
    return status


def accessible_items(status: WardrobeStatus, items: Sequence[T]) -> List[T]:
    """The leading items the user may still see, in stored order."""

    return list(items[: status.accessible])


def is_item_hidden(status: WardrobeStatus, position: int) -> bool:
    return position >= status.accessible


def wardrobe_limit_message(tier: Tier, limit: Limit) -> str:
    if limit.is_unlimited:
        return f"Unlimited wardrobe ({tier_display_name(tier)})"
    return f"{limit.count} items ({tier_display_name(tier)})"


def is_subscription_active(record: Optional[SubscriptionRecord]) -> bool:
    """Active and paid, regardless of end date."""

    return record is not None and record.status == "active" and record.tier is not Tier.FREE


def is_subscription_valid(record: Optional[SubscriptionRecord], now: datetime | None = None) -> bool:
    if record is None or record.status != "active":
        return False
    return not is_expired(record, now)


def days_remaining(record: Optional[SubscriptionRecord], now: datetime | None = None) -> Optional[int]:
    """Whole days left before the end date, never negative."""

    if record is None or record.end_date is None:
        return None
    seconds = (as_utc(record.end_date) - _now(now)).total_seconds()
    return max(0, math.ceil(seconds / 86400))


__all__ = [
    "FeatureAccess",
    "WardrobeStatus",
    "accessible_items",
    "can_add_item",
    "days_remaining",
    "effective_tier",
    "feature_access",
    "features_status",
    "is_expired",
    "is_item_hidden",
    "is_subscription_active",
    "is_subscription_valid",
    "plan_limits",
    "tier_display_name",
    "tier_limit",
    "wardrobe_limit_message",
    "wardrobe_status",
]
