# src/taskboard/storage/collection.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.ports import BlobStore

logger = logging.getLogger(__name__)

TODOS_KEY = "todos"
PROJECTS_KEY = "projects"


class PersistenceError(RuntimeError):
    """Persisted document exists but is not a JSON array."""


class JsonCollection:
    """
    One named collection (a JSON array) inside a blob store.

    With store=None the collection is "unavailable": load() returns None and
    save() does nothing, so the app keeps working memory-only.
    Malformed JSON is not repaired here; json.JSONDecodeError propagates.
    """

    def __init__(self, store: BlobStore | None, key: str) -> None:
        self._store = store
        self._key = key
        if store is None:
            logger.debug("Collection %s has no store; running memory-only.", key)

    @property
    def key(self) -> str:
        return self._key

    @property
    def available(self) -> bool:
        return self._store is not None

    def load(self) -> list[dict[str, Any]] | None:
        if self._store is None:
            return None
        raw = self._store.get_item(self._key)
        if not raw:
            return None
        data = json.loads(raw)
        if not isinstance(data, list):
            raise PersistenceError(
                f"collection {self._key!r} holds {type(data).__name__}, expected a JSON array"
            )
        return data

    def save(self, items: list[dict[str, Any]]) -> None:
        if self._store is None:
            return
        self._store.set_item(self._key, json.dumps(items, ensure_ascii=False))
