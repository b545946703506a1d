"""Outfit generation against a fake Gemini model."""

from types import SimpleNamespace

import pytest

from fitfx_app.config import FitFXConfig
from models.wardrobe_item import WardrobeItem
from tools.outfit_generator import OutfitGenerationError, OutfitGenerator, build_prompt, extract_json_array

_OUTFIT = (
    '{"outfitName": "Weekend Ease", "occasion": "Casual", "colorCombination": ["Navy", "White"], '
    '"topWear": "White tee", "bottomWear": "Navy chinos", "footwear": "Sneakers"}'
)


class _FakeModel:
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list = []

    def generate_content(self, prompt: str):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def test_extract_json_array_from_fenced_reply() -> None:
    fence = "`" * 3
    reply = f"Here you go:\n{fence}json\n[{_OUTFIT}]\n{fence}\nEnjoy!"

    assert extract_json_array(reply)[0]["outfitName"] == "Weekend Ease"


def test_extract_json_array_requires_array() -> None:
    with pytest.raises(OutfitGenerationError):
        extract_json_array("no outfits today")


def test_generate_skips_invalid_outfits() -> None:
    model = _FakeModel(text=f'[{_OUTFIT}, {{"outfitName": "broken"}}]')
    generator = OutfitGenerator(FitFXConfig(), model=model)

    outfits = generator.generate({"age": 30}, [WardrobeItem(id="a", color="Navy", material="Cotton")], count=2)

    assert len(outfits) == 1
    assert outfits[0].color_combination == ["Navy", "White"]
    assert "Navy Cotton" in model.prompts[0]


def test_generate_fails_when_nothing_is_valid() -> None:
    generator = OutfitGenerator(FitFXConfig(), model=_FakeModel(text='[{"outfitName": "broken"}]'))

    with pytest.raises(OutfitGenerationError):
        generator.generate({}, [])


def test_generate_wraps_model_errors() -> None:
    generator = OutfitGenerator(FitFXConfig(), model=_FakeModel(error=RuntimeError("quota")))

    with pytest.raises(OutfitGenerationError):
        generator.generate({}, [])


def test_missing_api_key_is_reported() -> None:
    with pytest.raises(OutfitGenerationError):
        OutfitGenerator(FitFXConfig(gemini_api_key=None)).generate({}, [])


def test_prompt_mentions_empty_wardrobe() -> None:
    prompt = build_prompt({"favoriteColors": ["Teal"]}, [], 5)

    assert "No wardrobe items yet" in prompt
    assert "Teal" in prompt
    assert "Suggest 5 outfits" in prompt
