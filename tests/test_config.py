"""Configuration loading."""

from pathlib import Path

import pytest

from fitfx_app.config import DEFAULT_GEMINI_MODEL, FitFXConfig


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "APP_ENV",
        "APP_CONFIG_PATH",
        "FITFX_CONFIG_DIR",
        "GEMINI_API_KEY",
        "MODEL",
        "DOCUMENT_STORE_BACKEND",
        "DOCUMENT_STORE_PATH",
        "CACHE_PATH",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    config = FitFXConfig.from_env()

    assert config.model == DEFAULT_GEMINI_MODEL
    assert config.document_store_backend == "sqlite"
    assert config.gemini_api_key is None


def test_yaml_file_is_overridden_by_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    (tmp_path / "staging.yaml").write_text(
        "# staging\nmodel: \"gemini-test\"\ndocument_store_backend: memory\ncache_path: /tmp/cache.json\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("FITFX_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("CACHE_PATH", "/var/cache.json")

    config = FitFXConfig.from_env()

    assert config.environment == "staging"
    assert config.model == "gemini-test"
    assert config.document_store_backend == "memory"
    assert config.cache_path == "/var/cache.json"


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        FitFXConfig(document_store_backend="firestore")
