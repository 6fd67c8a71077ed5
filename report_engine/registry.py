"""File Registry and Selection Set"""
import logging
from typing import Iterable, Optional

from pydantic import ValidationError

from report_engine.blob_store import BlobStore
from report_engine.errors import RecordNotFoundError
from report_engine.schemas import FileRecord, SortField, SortOrder
from report_engine.store import KeyValueStore

logger = logging.getLogger(__name__)


class SelectionSet:
    """Unordered set of record identifiers chosen for the next analysis."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    def toggle(self, record_id: str) -> bool:
        """Flip membership; returns True if the id is now selected."""
        if record_id in self._ids:
            self._ids.discard(record_id)
            return False
        self._ids.add(record_id)
        return True

    def toggle_all(self, visible_ids: list[str]) -> None:
        """Select exactly the visible ids, or clear if they are all selected already."""
        if visible_ids and len(self._ids) == len(visible_ids) and self._ids.issuperset(visible_ids):
            self._ids.clear()
        else:
            self._ids = set(visible_ids)

    def discard(self, ids: Iterable[str]) -> None:
        self._ids.difference_update(ids)

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)


def _sort_key(field: SortField):
    if field == SortField.NAME:
        return lambda r: r.name
    if field == SortField.SIZE:
        return lambda r: r.size
    return lambda r: r.upload_date


class FileRegistry:
    """
    Ordered collection of FileRecords mirrored to a key/value store.

    Every mutation rewrites the whole collection under ``storage_key``. The
    transient ``blob_url`` of PDFs is never written and is released whenever
    its owning record leaves the registry.
    """

    def __init__(self, store: KeyValueStore, storage_key: str, blob_store: BlobStore):
        self.store = store
        self.storage_key = storage_key
        self.blob_store = blob_store
        self._records: list[FileRecord] = []

    def load(self) -> list[FileRecord]:
        records = []
        for raw in self.store.load(self.storage_key):
            try:
                record = FileRecord.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping unreadable stored file record: %s", e)
                continue
            # References from a previous process are dead
            record.blob_url = None
            records.append(record)
        self._records = records
        logger.info("Loaded %d file records from %s", len(records), self.storage_key)
        return list(records)

    def _commit(self, records: list[FileRecord]) -> None:
        """Save ``records`` as the whole collection, then make them current. A failed save changes nothing."""
        self.store.save(self.storage_key, [r.to_storage() for r in records])
        self._records = records

    def add(self, records: Iterable[FileRecord]) -> list[FileRecord]:
        records = list(records)
        try:
            self._commit(self._records + records)
        except Exception:
            # The new records never made it in, so nothing else owns their references
            for record in records:
                self.blob_store.revoke(record.blob_url)
            raise
        return records

    def replace(self, record: FileRecord) -> FileRecord:
        for i, existing in enumerate(self._records):
            if existing.id == record.id:
                updated = list(self._records)
                updated[i] = record
                self._commit(updated)
                if existing.blob_url and existing.blob_url != record.blob_url:
                    self.blob_store.revoke(existing.blob_url)
                return record
        raise RecordNotFoundError("File", record.id)

    def remove(self, ids: Iterable[str]) -> list[FileRecord]:
        """Remove records by id (unknown ids are ignored) and release their references."""
        doomed = set(ids)
        removed = [r for r in self._records if r.id in doomed]
        if not removed:
            return []
        self._commit([r for r in self._records if r.id not in doomed])
        for record in removed:
            if record.blob_url:
                self.blob_store.revoke(record.blob_url)
        return removed

    def get(self, record_id: str) -> FileRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise RecordNotFoundError("File", record_id)

    def all(self) -> list[FileRecord]:
        return list(self._records)

    def search(
        self,
        query: str = "",
        sort_field: SortField = SortField.UPLOAD_DATE,
        order: SortOrder = SortOrder.DESC,
    ) -> list[FileRecord]:
        needle = (query or "").lower()
        matches = [r for r in self._records if needle in r.name.lower()]
        return sorted(matches, key=_sort_key(sort_field), reverse=order == SortOrder.DESC)

    def total_size(self) -> int:
        return sum(r.size for r in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: Optional[str]) -> bool:
        return any(r.id == record_id for r in self._records)
