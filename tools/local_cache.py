"""Local string key-value cache used for device-side calendar edits."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional


class KeyValueCache:
    """Interface for a string-to-string cache."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryCache(KeyValueCache):
    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JSONFileCache(KeyValueCache):
    """All keys in one JSON object on disk. I/O errors propagate as ``OSError``."""

    def __init__(self, path: str | Path = "data/local_cache.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
        except json.JSONDecodeError:
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self.path.write_text(json.dumps(values, indent=2))


__all__ = ["InMemoryCache", "JSONFileCache", "KeyValueCache"]
