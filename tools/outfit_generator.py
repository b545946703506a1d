"""Personalized outfit suggestions from the Gemini API."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import google.generativeai as genai
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fitfx_app.config import FitFXConfig
from fitfx_app.logging_config import get_logger, log_event
from models.wardrobe_item import WardrobeItem
from tools.observability import instrument_operation

LOGGER = get_logger(__name__)

DEFAULT_OUTFIT_COUNT = 15
_FENCE = "`" * 3
_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


class OutfitGenerationError(RuntimeError):
    """The model could not be called or returned nothing usable."""


class PersonalizedOutfit(BaseModel):
    """One outfit in the model's JSON answer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    outfit_name: str = Field(alias="outfitName")
    occasion: str
    color_combination: List[str] = Field(default_factory=list, alias="colorCombination")
    top_wear: str = Field(alias="topWear")
    bottom_wear: str = Field(alias="bottomWear")
    layering: Optional[str] = None
    footwear: str
    accessories: str = ""
    why_it_works: str = Field(default="", alias="whyItWorks")
    style_category: str = Field(default="", alias="styleCategory")


def extract_json_array(text: str) -> List[Any]:
    """Pull the first JSON array out of a model reply.

    Replies often wrap the JSON in a fenced code block or add prose around it.
    """

    candidate = text or ""
    if f"{_FENCE}json" in candidate:
        candidate = candidate.split(f"{_FENCE}json", 1)[1].split(_FENCE, 1)[0]
    elif _FENCE in candidate:
        parts = candidate.split(_FENCE)
        if len(parts) > 1:
            candidate = parts[1]

    match = _ARRAY_PATTERN.search(candidate)
    if not match:
        raise OutfitGenerationError("No JSON array found in model response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise OutfitGenerationError(f"Model response is not valid JSON: {exc.msg}") from exc
    if not isinstance(payload, list):
        raise OutfitGenerationError("Model response is not a JSON array")
    return payload


def _profile_lines(profile: Dict[str, Any]) -> str:
    def describe(key: str, default: str = "Not specified") -> str:
        value = profile.get(key)
        if isinstance(value, (list, tuple)):
            return ", ".join(str(part) for part in value) or default
        return str(value) if value else default

    return "\n".join(
        [
            f"- Age: {describe('age')}",
            f"- Gender: {describe('gender')}",
            f"- Body Type: {describe('bodyType')}",
            f"- Preferred Styles: {describe('preferredStyles')}",
            f"- Favorite Colors: {describe('favoriteColors')}",
            f"- Preferred Occasions: {describe('preferredOccasions', 'All occasions')}",
            f"- Preferred Fabrics: {describe('preferredFabrics')}",
        ]
    )


def build_prompt(profile: Dict[str, Any], wardrobe: Sequence[WardrobeItem], count: int) -> str:
    wardrobe_lines = (
        "\n".join(f"- {item.color} {item.material or item.type or ''}".rstrip() for item in wardrobe)
        or "No wardrobe items yet"
    )
    return (
        f"You are a fashion stylist. Suggest {count} outfits for this user.\n\n"
        f"USER PROFILE:\n{_profile_lines(profile)}\n\n"
        f"WARDROBE ITEMS ({len(wardrobe)} items):\n{wardrobe_lines}\n\n"
        "Return ONLY a JSON array of objects with the keys outfitName, occasion, "
        "colorCombination (array of color names), topWear, bottomWear, layering, "
        "footwear, accessories, whyItWorks and styleCategory."
    )


class OutfitGenerator:
    """Calls a Gemini model and validates its outfit list."""

    def __init__(self, config: FitFXConfig, model: Any | None = None) -> None:
        self.config = config
        self._model = model

    def _get_model(self) -> Any:
        if self._model is None:
            if not self.config.gemini_api_key:
                raise OutfitGenerationError("Gemini API key is not configured")
            genai.configure(api_key=self.config.gemini_api_key)
            self._model = genai.GenerativeModel(self.config.model)
        return self._model

    @instrument_operation("generate_personalized_outfits", expected=(OutfitGenerationError,))
    def generate(
        self,
        profile: Dict[str, Any],
        wardrobe: Sequence[WardrobeItem],
        count: int = DEFAULT_OUTFIT_COUNT,
    ) -> List[PersonalizedOutfit]:
        model = self._get_model()
        try:
            response = model.generate_content(build_prompt(profile, wardrobe, count))
            text = response.text
        except Exception as exc:  # noqa: BLE001
            raise OutfitGenerationError(f"Outfit generation request failed: {exc}") from exc

        raw_outfits = extract_json_array(text)
        outfits: List[PersonalizedOutfit] = []
        for raw in raw_outfits:
            try:
                outfits.append(PersonalizedOutfit.model_validate(raw))
            except ValidationError as exc:
                LOGGER.warning("Skipping outfit with %s validation error(s)", exc.error_count())
        if not outfits:
            raise OutfitGenerationError("Invalid outfit data received from model")

        log_event(
            LOGGER,
            logging.INFO,
            "outfits_generated",
            requested=count,
            returned=len(outfits),
            wardrobe_size=len(wardrobe),
        )
        return outfits


__all__ = [
    "OutfitGenerationError",
    "OutfitGenerator",
    "PersonalizedOutfit",
    "build_prompt",
    "extract_json_array",
]
