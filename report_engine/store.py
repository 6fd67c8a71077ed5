"""Key/Value Store - whole-document persistence under fixed keys."""
import copy
import logging
from typing import Any, Callable

from sqlalchemy.orm import Session

from backend.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Interface: load a whole document, save a whole document. No partial writes."""

    def load(self, key: str) -> list[dict[str, Any]]:
        raise NotImplementedError

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self):
        self._data: dict[str, list[dict[str, Any]]] = {}

    def load(self, key: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._data.get(key, []))

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        self._data[key] = copy.deepcopy(documents)


class SqlKeyValueStore(KeyValueStore):
    """Backed by the kv_store table; one row per storage key."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def load(self, key: str) -> list[dict[str, Any]]:
        db = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                return []
            if not isinstance(entry.value, list):
                logger.error("Stored value under %s is not a list; ignoring it", key)
                return []
            return entry.value
        finally:
            db.close()

    def save(self, key: str, documents: list[dict[str, Any]]) -> None:
        db = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=documents))
            else:
                entry.value = documents
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
