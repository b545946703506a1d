"""Subscription record model and wardrobe limit value types."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# Stored records with an end date nobody can read are treated as long expired.
_UNREADABLE_END_DATE = datetime.min.replace(tzinfo=timezone.utc)


class Tier(str, Enum):
    """Subscription tiers. Ordering lives in ``models.plans.TIER_RANK``."""

    FREE = "free"
    PLUS = "plus"
    PREMIUM = "premium"

    @classmethod
    def parse(cls, raw: Any) -> "Tier":
        """Map a stored tier string onto a tier, collapsing unknown values to free."""

        if isinstance(raw, Tier):
            return raw
        key = str(raw or "").strip().lower()
        tier = _TIER_ALIASES.get(key)
        if tier is None:
            if key:
                logger.warning("Unknown subscription tier %r, treating as free", raw)
            return cls.FREE
        return tier


_TIER_ALIASES: Dict[str, Tier] = {
    "free": Tier.FREE,
    "plus": Tier.PLUS,
    "style_plus": Tier.PLUS,
    "premium": Tier.PREMIUM,
    "style_x": Tier.PREMIUM,
}


@dataclass(frozen=True)
class Finite:
    """A wardrobe cap of ``count`` items."""

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Wardrobe limit cannot be negative: {self.count}")

    @property
    def is_unlimited(self) -> bool:
        return False

    def cap(self, total: int) -> int:
        return min(total, self.count)

    def allows(self, current_count: int) -> bool:
        return current_count < self.count

    def __str__(self) -> str:
        return str(self.count)


@dataclass(frozen=True)
class Unlimited:
    """No cap on wardrobe size."""

    @property
    def is_unlimited(self) -> bool:
        return True

    def cap(self, total: int) -> int:
        return total

    def allows(self, current_count: int) -> bool:
        return True

    def __str__(self) -> str:
        return "unlimited"


UNLIMITED = Unlimited()
Limit = Union[Finite, Unlimited]


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, reading naive values as UTC.

    Raises :class:`ValueError` for values that are present but unreadable.
    """

    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        parsed = raw
    else:
        parsed = datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes so comparisons never mix kinds."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SubscriptionRecord:
    """Per-user subscription state as stored in the user document."""

    tier: Tier = Tier.FREE
    status: str = "active"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    payment_id: Optional[str] = None
    order_id: Optional[str] = None

    @classmethod
    def free(cls, now: datetime | None = None) -> "SubscriptionRecord":
        """The record every new account starts with."""

        return cls(tier=Tier.FREE, status="active", start_date=now or utcnow())

    @classmethod
    def unknown(cls) -> "SubscriptionRecord":
        """Stand-in used when the stored record could not be fetched."""

        return cls(tier=Tier.FREE, status="unknown")

    @classmethod
    def from_document(cls, payload: Dict[str, Any]) -> "SubscriptionRecord":
        """Build a record from the ``subscription`` field of a user document."""

        try:
            start_date = parse_timestamp(payload.get("startDate"))
        except ValueError:
            logger.warning("Ignoring unreadable subscription start date")
            start_date = None
        try:
            end_date = parse_timestamp(payload.get("endDate"))
        except ValueError:
            logger.warning("Unreadable subscription end date, treating subscription as expired")
            end_date = _UNREADABLE_END_DATE

        return cls(
            tier=Tier.parse(payload.get("tier")),
            status=str(payload.get("status") or "unknown"),
            start_date=start_date,
            end_date=end_date,
            payment_id=payload.get("razorpayPaymentId"),
            order_id=payload.get("razorpayOrderId"),
        )

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"tier": self.tier.value, "status": self.status}
        if self.start_date is not None:
            document["startDate"] = self.start_date.isoformat()
        if self.end_date is not None:
            document["endDate"] = self.end_date.isoformat()
        if self.payment_id:
            document["razorpayPaymentId"] = self.payment_id
        if self.order_id:
            document["razorpayOrderId"] = self.order_id
        return document


__all__ = [
    "Finite",
    "Limit",
    "SubscriptionRecord",
    "Tier",
    "UNLIMITED",
    "Unlimited",
    "as_utc",
    "parse_timestamp",
    "utcnow",
]
