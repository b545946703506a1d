"""Canonical subscription plan definitions.

Tier order, wardrobe caps, per-plan quotas and the AI feature requirements all
live here so the entitlement checks and the HTTP layer read from one table.
"""

from dataclasses import dataclass
from typing import Dict, Union

from models.subscription import UNLIMITED, Finite, Limit, Tier

TIER_RANK: Dict[Tier, int] = {
    Tier.FREE: 0,
    Tier.PLUS: 1,
    Tier.PREMIUM: 2,
}

TIER_DISPLAY_NAMES: Dict[Tier, str] = {
    Tier.FREE: "Free",
    Tier.PLUS: "Style+",
    Tier.PREMIUM: "StyleX",
}

WARDROBE_LIMITS: Dict[Tier, Limit] = {
    Tier.FREE: Finite(5),
    Tier.PLUS: Finite(50),
    Tier.PREMIUM: UNLIMITED,
}


@dataclass(frozen=True)
class PlanLimits:
    """Quotas and switches attached to a tier."""

    color_suggestions: int
    outfit_previews: int
    wardrobe_limit: Limit
    image_editor_access: bool
    batch_generation: bool
    chatbot_access: str


PLAN_LIMITS: Dict[Tier, PlanLimits] = {
    Tier.FREE: PlanLimits(
        color_suggestions=5,
        outfit_previews=3,
        wardrobe_limit=WARDROBE_LIMITS[Tier.FREE],
        image_editor_access=False,
        batch_generation=False,
        chatbot_access="basic",
    ),
    Tier.PLUS: PlanLimits(
        color_suggestions=10,
        outfit_previews=10,
        wardrobe_limit=WARDROBE_LIMITS[Tier.PLUS],
        image_editor_access=True,
        batch_generation=True,
        chatbot_access="standard",
    ),
    Tier.PREMIUM: PlanLimits(
        color_suggestions=999,
        outfit_previews=999,
        wardrobe_limit=WARDROBE_LIMITS[Tier.PREMIUM],
        image_editor_access=True,
        batch_generation=True,
        chatbot_access="premium",
    ),
}

AI_EDIT = "ai-edit"
VIRTUAL_TRYON = "virtual-tryon"
FABRIC_MIXER = "fabric-mixer"
COLOR_SUGGESTION = "color-suggestion"

FEATURE_REQUIREMENTS: Dict[str, Tier] = {
    AI_EDIT: Tier.FREE,
    VIRTUAL_TRYON: Tier.PLUS,
    FABRIC_MIXER: Tier.PREMIUM,
    COLOR_SUGGESTION: Tier.FREE,
}

SUBSCRIPTION_STATUSES = ("active", "cancelled", "past_due", "expired")


def validate_feature(value: str) -> str:
    """Normalise a feature name and reject unknown ones."""

    key = value.strip().lower().replace("_", "-")
    if key not in FEATURE_REQUIREMENTS:
        raise ValueError(f"Unsupported feature '{value}'. Allowed: {sorted(FEATURE_REQUIREMENTS)}")
    return key


def validate_status(value: str) -> str:
    key = value.strip().lower()
    if key not in SUBSCRIPTION_STATUSES:
        raise ValueError(f"Unsupported subscription status '{value}'. Allowed: {list(SUBSCRIPTION_STATUSES)}")
    return key


def limit_to_json(limit: Limit) -> Union[int, None]:
    """Wire form of a limit: the count, or ``None`` for unlimited."""

    return None if limit.is_unlimited else limit.count


__all__ = [
    "AI_EDIT",
    "COLOR_SUGGESTION",
    "FABRIC_MIXER",
    "FEATURE_REQUIREMENTS",
    "PLAN_LIMITS",
    "PlanLimits",
    "SUBSCRIPTION_STATUSES",
    "TIER_DISPLAY_NAMES",
    "TIER_RANK",
    "VIRTUAL_TRYON",
    "WARDROBE_LIMITS",
    "limit_to_json",
    "validate_feature",
    "validate_status",
]
