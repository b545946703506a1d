"""Runtime settings for the FitFX services."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Dict, Optional

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DOCUMENT_STORE_BACKENDS = ("memory", "sqlite")


@dataclass
class FitFXConfig:
    """Settings shared by the stores, services and HTTP layer.

    The Gemini key is the only secret. Storage settings point at local files
    so nothing here needs a cloud project.
    """

    gemini_api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    document_store_backend: str = "sqlite"
    document_store_path: Optional[str] = None
    cache_path: Optional[str] = None
    environment: str | None = None

    def __post_init__(self) -> None:
        backend = (self.document_store_backend or "sqlite").strip().lower()
        if backend not in DOCUMENT_STORE_BACKENDS:
            raise ValueError(
                f"Unsupported document store backend '{self.document_store_backend}'. "
                f"Allowed: {list(DOCUMENT_STORE_BACKENDS)}"
            )
        self.document_store_backend = backend
        self.model = self.model or DEFAULT_GEMINI_MODEL

    @classmethod
    def from_env(cls) -> "FitFXConfig":
        """Read settings from ``APP_CONFIG_PATH`` or ``<FITFX_CONFIG_DIR>/<APP_ENV>.yaml``.

        An upper-cased environment variable (``GEMINI_API_KEY``, ``CACHE_PATH``
        and so on) wins over the same key in the file.
        """

        env_name = os.getenv("APP_ENV")
        file_values: Dict[str, str] = {}
        if env_name or os.getenv("APP_CONFIG_PATH"):
            file_values = cls._load_yaml_config(cls._config_file(env_name))

        values: Dict[str, Optional[str]] = {}
        for field in fields(cls):
            if field.name == "environment":
                continue
            raw = os.getenv(field.name.upper(), file_values.get(field.name))
            if raw not in (None, ""):
                values[field.name] = raw
        return cls(environment=env_name, **values)

    @staticmethod
    def _config_file(env_name: Optional[str]) -> Path:
        explicit = os.getenv("APP_CONFIG_PATH")
        if explicit:
            return Path(explicit)
        return Path(os.getenv("FITFX_CONFIG_DIR", "config/environments")) / f"{env_name}.yaml"

    @staticmethod
    def _load_yaml_config(path: Path) -> Dict[str, str]:
        """Parse flat ``key: value`` lines. A missing file yields no values."""

        if not path.exists():
            return {}
        config: Dict[str, str] = {}
        for line in path.read_text().splitlines():
            key, sep, raw_value = line.strip().partition(":")
            if not sep or not key or key.startswith("#"):
                continue
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["DEFAULT_GEMINI_MODEL", "DOCUMENT_STORE_BACKENDS", "FitFXConfig"]
