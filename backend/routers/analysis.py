"""Market Analysis Routes"""
from fastapi import APIRouter, HTTPException, Depends, Response
from pydantic import BaseModel
from typing import Optional
import logging

from config.settings import Settings
from backend.state import get_workspace
from backend.utils import analysis_to_dict, content_disposition
from report_engine import exporters
from report_engine.errors import (
    AnalysisRequestError,
    CredentialsNotConfiguredError,
    ExportError,
    MalformedAnalysisReplyError,
    NothingSelectedError,
)
from report_engine.schemas import AnalysisVariant, MarketAnalysis
from report_engine.workspace import Workspace

logger = logging.getLogger(__name__)
router = APIRouter()
_settings = Settings()


class AnalysisRequest(BaseModel):
    variant: Optional[AnalysisVariant] = None


def _latest_or_404(workspace: Workspace) -> MarketAnalysis:
    if workspace.latest_result is None:
        raise HTTPException(status_code=404, detail="No analysis result yet. Run an analysis first.")
    return workspace.latest_result


@router.get("/status")
async def analysis_status(workspace: Workspace = Depends(get_workspace)):
    """Which provider is configured, whether its key is present, and whether a run is in flight."""
    client = workspace.analysis_client
    return {
        "provider": client.provider_name,
        "model": client.model,
        "default_variant": _settings.ANALYSIS_VARIANT.value,
        "credentials_configured": client.credentials_configured(),
        "is_analyzing": workspace.is_analyzing,
        "selected_files": len(workspace.selection),
        "has_result": workspace.latest_result is not None,
    }


@router.post("/run")
async def run_analysis(body: Optional[AnalysisRequest] = None, workspace: Workspace = Depends(get_workspace)):
    if workspace.is_analyzing:
        raise HTTPException(status_code=409, detail="An analysis is already running. Wait for it to finish.")
    variant = (body.variant if body else None) or _settings.ANALYSIS_VARIANT
    try:
        result = await workspace.run_analysis(variant)
    except NothingSelectedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CredentialsNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except MalformedAnalysisReplyError as e:
        logger.warning("Malformed model reply: %s", e.reason)
        raise HTTPException(status_code=502, detail=f"The AI reply could not be read: {e.reason}")
    except AnalysisRequestError as e:
        raise HTTPException(
            status_code=502,
            detail=f"Analysis request failed. Check the API configuration or network connection. ({e})",
        )
    return analysis_to_dict(result, variant)


@router.get("/latest")
async def latest_analysis(workspace: Workspace = Depends(get_workspace)):
    return analysis_to_dict(_latest_or_404(workspace), workspace.latest_variant)


@router.get("/export/markdown")
async def export_markdown(workspace: Workspace = Depends(get_workspace)):
    result = _latest_or_404(workspace)
    return Response(
        content=exporters.to_markdown(result),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": content_disposition(exporters.export_filename("md"))},
    )


@router.get("/export/pdf")
async def export_pdf(workspace: Workspace = Depends(get_workspace)):
    result = _latest_or_404(workspace)
    try:
        pdf = exporters.to_pdf(result)
    except ExportError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(exporters.export_filename("pdf"))},
    )
