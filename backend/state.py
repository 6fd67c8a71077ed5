"""Workspace wiring and the FastAPI dependency that hands it to routers."""
import logging

from fastapi import Request

from config.settings import Settings
from report_engine.analysis_client import AnalysisClient
from report_engine.blob_store import BlobStore
from report_engine.store import KeyValueStore
from report_engine.workspace import Workspace

logger = logging.getLogger(__name__)


def build_analysis_client(settings: Settings) -> AnalysisClient:
    provider = (settings.ANALYSIS_PROVIDER or "anthropic").strip().lower()
    return AnalysisClient(
        provider_name=provider,
        # Looked up per call against the settings loaded at startup; a changed key needs a restart
        api_key_lookup=settings.api_key_for,
        model=settings.model_for(provider),
        language=settings.ANALYSIS_LANGUAGE,
        max_tokens=settings.ANTHROPIC_MAX_TOKENS,
    )


def build_workspace(settings: Settings, store: KeyValueStore) -> Workspace:
    workspace = Workspace(
        store=store,
        analysis_client=build_analysis_client(settings),
        files_key=settings.FILES_STORAGE_KEY,
        customers_key=settings.CUSTOMERS_STORAGE_KEY,
        blob_store=BlobStore(settings.BLOB_DIR),
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
    )
    workspace.load()
    return workspace


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace
