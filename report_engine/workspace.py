"""Workspace - the single-writer application state behind the API."""
import logging
from typing import Iterable, Optional

from report_engine.analysis_client import AnalysisClient
from report_engine.blob_store import BlobStore
from report_engine.customers import CustomerRegistry
from report_engine.errors import RecordNotFoundError
from report_engine.file_reader import FileReader, Upload
from report_engine.registry import FileRegistry, SelectionSet
from report_engine.schemas import (
    AnalysisVariant,
    FileRecord,
    IngestionFailure,
    MarketAnalysis,
    SortField,
    SortOrder,
)
from report_engine.store import KeyValueStore

logger = logging.getLogger(__name__)


class Workspace:
    """
    Owns the file registry, its selection set, the customer registry, the
    transient reference store and the latest analysis result. All mutation
    happens from request handlers on one event loop, so no locking is needed.
    """

    def __init__(
        self,
        store: KeyValueStore,
        analysis_client: AnalysisClient,
        files_key: str,
        customers_key: str,
        blob_store: Optional[BlobStore] = None,
        max_upload_bytes: Optional[int] = None,
    ):
        self.blob_store = blob_store if blob_store is not None else BlobStore()
        self.files = FileRegistry(store, files_key, self.blob_store)
        self.selection = SelectionSet()
        self.customers = CustomerRegistry(store, customers_key)
        self.reader = FileReader(self.blob_store, max_bytes=max_upload_bytes)
        self.analysis_client = analysis_client
        self.latest_result: Optional[MarketAnalysis] = None
        self.latest_variant: Optional[AnalysisVariant] = None
        self.is_analyzing = False

    def load(self) -> None:
        self.files.load()
        self.customers.load()

    def close(self) -> None:
        self.blob_store.close()

    async def ingest(self, uploads: Iterable[Upload]) -> tuple[list[FileRecord], list[IngestionFailure]]:
        records, failures = await self.reader.read_batch(uploads)
        if records:
            self.files.add(records)
        logger.info("Ingested %d file(s), %d failure(s)", len(records), len(failures))
        return records, failures

    def delete_files(self, ids: Iterable[str]) -> list[FileRecord]:
        ids = list(ids)
        removed = self.files.remove(ids)
        self.selection.discard(ids)
        return removed

    def toggle_file(self, file_id: str) -> bool:
        if file_id not in self.files:
            raise RecordNotFoundError("File", file_id)
        return self.selection.toggle(file_id)

    def toggle_all_files(self, query: str = "") -> None:
        visible = [r.id for r in self.files.search(query)]
        self.selection.toggle_all(visible)

    def selected_files(self) -> list[FileRecord]:
        """Selected records in insertion order."""
        return [r for r in self.files.all() if r.id in self.selection]

    def visible_files(
        self,
        query: str = "",
        sort_field: SortField = SortField.UPLOAD_DATE,
        order: SortOrder = SortOrder.DESC,
    ) -> list[FileRecord]:
        return self.files.search(query, sort_field, order)

    def stats(self) -> dict:
        return {
            "totalFiles": len(self.files),
            "selectedFiles": len(self.selection),
            "totalSize": self.files.total_size(),
        }

    async def run_analysis(self, variant: AnalysisVariant = AnalysisVariant.GENERAL) -> MarketAnalysis:
        customers = self.customers.selected() if variant == AnalysisVariant.CUSTOMER else None
        self.is_analyzing = True
        try:
            result = await self.analysis_client.analyze(self.selected_files(), variant, customers)
        finally:
            self.is_analyzing = False
        self.latest_result = result
        self.latest_variant = variant
        return result
