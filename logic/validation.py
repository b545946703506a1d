"""Pydantic schemas for validating payloads entering the services."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from logic.calendar_planner import parse_date_key
from models.calendar import CalendarSuggestion
from models.subscription import Tier


class GarmentPayload(BaseModel):
    """Input contract for adding a wardrobe item."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    color: str = Field(min_length=1)
    material: Optional[str] = None
    type: Optional[str] = None
    image: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    size: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("color")
    @classmethod
    def _strip_color(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("color cannot be blank")
        return stripped


class GarmentUpdate(BaseModel):
    """Partial update for an existing wardrobe item. ``id`` is not editable."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    color: Optional[str] = Field(default=None, min_length=1)
    material: Optional[str] = None
    type: Optional[str] = None
    image: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    size: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class CalendarSuggestionPayload(BaseModel):
    """A calendar day as stored by the web and mobile clients."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date_string: str = Field(alias="dateString")
    occasion: str = Field(min_length=1)
    style: str = Field(min_length=1)
    colour_combination: str = Field(default="", alias="Colour Combination")
    top: str = Field(default="", alias="T-Shirt/Shirt")
    bottom: str = Field(default="", alias="Trousers/Bottom")
    layer: str = Field(default="", alias="Jacket/Layer")
    shoes_accessories: str = Field(default="", alias="Shoes & Accessories")

    @field_validator("date_string")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        parse_date_key(value)
        return value

    @classmethod
    def from_suggestion(cls, suggestion: CalendarSuggestion) -> "CalendarSuggestionPayload":
        return cls.model_validate(suggestion.to_document())

    def to_suggestion(self) -> CalendarSuggestion:
        return CalendarSuggestion(**self.model_dump())


class SubscriptionChange(BaseModel):
    """Payment confirmation that moves a user onto a tier."""

    tier: Tier
    end_date: Optional[datetime] = None
    payment_id: Optional[str] = None
    order_id: Optional[str] = None

    @field_validator("tier", mode="before")
    @classmethod
    def _parse_tier(cls, value: Any) -> Tier:
        key = str(value or "").strip().lower()
        parsed = Tier.parse(key)
        if parsed is Tier.FREE and key != Tier.FREE.value:
            raise ValueError(f"Unsupported tier '{value}'")
        return parsed


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["invalid"] = "invalid"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent payload."""

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "CalendarSuggestionPayload",
    "GarmentPayload",
    "GarmentUpdate",
    "SubscriptionChange",
    "ValidationResult",
    "validation_failure",
]
