"""Per-user document storage abstractions and SQLite implementation."""
from __future__ import annotations

import copy
import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


class DocumentStoreError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


def _deep_merge(base: Dict[str, Any], partial: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in partial.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _apply_field_paths(document: Dict[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Set each ``a.b.c`` path, creating intermediate maps as needed."""

    updated = copy.deepcopy(document)
    for path, value in fields.items():
        parts = path.split(".")
        target = updated
        for part in parts[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[parts[-1]] = copy.deepcopy(value)
    return updated


class DocumentStore:
    """Persistence interface for one document per user."""

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, user_id: str, partial: Mapping[str, Any], merge: bool = True) -> None:
        raise NotImplementedError

    def update(self, user_id: str, fields: Mapping[str, Any]) -> None:
        """Set dotted field paths on an existing document.

        Raises :class:`KeyError` when the user has no document.
        """

        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store for tests and local runs."""

    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self._documents: Dict[str, Dict[str, Any]] = copy.deepcopy(documents or {})

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        document = self._documents.get(user_id)
        return copy.deepcopy(document) if document is not None else None

    def set(self, user_id: str, partial: Mapping[str, Any], merge: bool = True) -> None:
        current = self._documents.get(user_id, {}) if merge else {}
        self._documents[user_id] = _deep_merge(current, partial)

    def update(self, user_id: str, fields: Mapping[str, Any]) -> None:
        if user_id not in self._documents:
            raise KeyError(f"No document for user {user_id}")
        self._documents[user_id] = _apply_field_paths(self._documents[user_id], fields)


class SQLiteDocumentStore(DocumentStore):
    """Local SQLite-backed store keeping each user document as JSON."""

    def __init__(self, database_path: str | Path = "data/fitfx.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS user_documents (
                    user_id TEXT PRIMARY KEY,
                    document TEXT NOT NULL
                );
                """
            )

    def _read(self, conn: sqlite3.Connection, user_id: str) -> Optional[Dict[str, Any]]:
        row = conn.execute(
            "SELECT document FROM user_documents WHERE user_id = ?", (user_id,)
        ).fetchone()
        return json.loads(row["document"]) if row else None

    def _write(self, conn: sqlite3.Connection, user_id: str, document: Dict[str, Any]) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO user_documents (user_id, document) VALUES (?, ?)",
            (user_id, json.dumps(document)),
        )

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            with self._connect() as conn:
                return self._read(conn, user_id)
        except (sqlite3.Error, json.JSONDecodeError) as exc:
            raise DocumentStoreError(f"Could not read document: {exc}") from exc

    def set(self, user_id: str, partial: Mapping[str, Any], merge: bool = True) -> None:
        try:
            with self._connect() as conn:
                current = (self._read(conn, user_id) or {}) if merge else {}
                self._write(conn, user_id, _deep_merge(current, partial))
        except (sqlite3.Error, json.JSONDecodeError, TypeError) as exc:
            raise DocumentStoreError(f"Could not write document: {exc}") from exc

    def update(self, user_id: str, fields: Mapping[str, Any]) -> None:
        try:
            with self._connect() as conn:
                current = self._read(conn, user_id)
                if current is None:
                    raise KeyError(f"No document for user {user_id}")
                self._write(conn, user_id, _apply_field_paths(current, fields))
        except (sqlite3.Error, json.JSONDecodeError, TypeError) as exc:
            raise DocumentStoreError(f"Could not update document: {exc}") from exc


__all__ = ["DocumentStore", "DocumentStoreError", "InMemoryDocumentStore", "SQLiteDocumentStore"]
