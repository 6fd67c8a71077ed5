"""Report File Routes"""
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Query, Request, Response
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
import logging

from backend.state import get_workspace
from backend.utils import content_disposition, file_to_dict
from report_engine.errors import RecordNotFoundError
from report_engine.file_reader import decode_data_url
from report_engine.schemas import FileRecord, PreviewCategory, SortField, SortOrder
from report_engine.workspace import Workspace

logger = logging.getLogger(__name__)
router = APIRouter()


class DeleteFilesRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)


def _summary(record: FileRecord, workspace: Workspace) -> dict:
    return file_to_dict(record, selected=record.id in workspace.selection)


def _get_or_404(workspace: Workspace, file_id: str) -> FileRecord:
    try:
        return workspace.files.get(file_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/")
async def upload_files(files: list[UploadFile] = File(...), workspace: Workspace = Depends(get_workspace)):
    """Ingest a batch of uploads. One unreadable file never blocks the others."""
    records, failures = await workspace.ingest(files)
    return {
        "files": [_summary(r, workspace) for r in records],
        "failures": [f.model_dump() for f in failures],
    }


@router.get("/")
async def list_files(
    q: str = "",
    sort: SortField = Query(SortField.UPLOAD_DATE),
    order: SortOrder = Query(SortOrder.DESC),
    workspace: Workspace = Depends(get_workspace),
):
    return [_summary(r, workspace) for r in workspace.visible_files(q, sort, order)]


@router.get("/stats")
async def file_stats(workspace: Workspace = Depends(get_workspace)):
    return workspace.stats()


@router.post("/delete")
async def delete_files(body: DeleteFilesRequest, workspace: Workspace = Depends(get_workspace)):
    removed = workspace.delete_files(body.ids)
    return {"status": "deleted", "ids": [r.id for r in removed]}


@router.get("/{file_id}")
async def get_file(file_id: str, workspace: Workspace = Depends(get_workspace)):
    return _get_or_404(workspace, file_id).model_dump(mode="json", by_alias=True)


@router.get("/{file_id}/preview")
async def preview_file(file_id: str, request: Request, workspace: Workspace = Depends(get_workspace)):
    """Preview payload by category: data URL for images, text, a blob link for PDFs."""
    record = _get_or_404(workspace, file_id)
    preview = {"id": record.id, "name": record.name, "type": record.type, "previewType": record.preview_type.value}
    if record.preview_type == PreviewCategory.IMAGE:
        preview["previewUrl"] = record.preview_url
    elif record.preview_type == PreviewCategory.TEXT:
        preview["content"] = record.content
    elif record.preview_type == PreviewCategory.PDF:
        if workspace.blob_store.is_live(record.blob_url):
            preview["blobUrl"] = record.blob_url
            preview["url"] = str(request.url_for("file_blob", file_id=record.id))
        else:
            preview["blobUrl"] = None
            preview["message"] = "Live PDF preview is not available after a restart; download the file instead."
    else:
        subtype = record.type.split("/", 1)[1] if "/" in record.type else "unknown"
        preview["message"] = (
            f"This file format ({subtype}) cannot be displayed directly, "
            "but it can still be sent to the AI for in-depth analysis."
        )
    return preview


@router.get("/{file_id}/blob")
async def file_blob(file_id: str, workspace: Workspace = Depends(get_workspace)):
    record = _get_or_404(workspace, file_id)
    path = workspace.blob_store.resolve(record.blob_url)
    if not path:
        raise HTTPException(status_code=404, detail="No live preview reference for this file")
    return FileResponse(path, media_type=record.type)


@router.get("/{file_id}/download")
async def download_file(file_id: str, workspace: Workspace = Depends(get_workspace)):
    record = _get_or_404(workspace, file_id)
    if record.preview_type == PreviewCategory.TEXT:
        data = (record.content or "").encode("utf-8")
    else:
        data = decode_data_url(record.content)
        if data is None:
            raise HTTPException(status_code=404, detail="File has no stored content")
    return Response(
        content=data,
        media_type=record.type,
        headers={"Content-Disposition": content_disposition(record.name)},
    )


@router.delete("/{file_id}")
async def delete_file(file_id: str, workspace: Workspace = Depends(get_workspace)):
    _get_or_404(workspace, file_id)
    workspace.delete_files([file_id])
    return {"status": "deleted", "ids": [file_id]}
