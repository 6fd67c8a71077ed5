"""Selection Routes"""
from fastapi import APIRouter, HTTPException, Depends

from backend.state import get_workspace
from report_engine.errors import RecordNotFoundError
from report_engine.workspace import Workspace

router = APIRouter()


def _selected_ids(workspace: Workspace) -> list[str]:
    return [r.id for r in workspace.selected_files()]


@router.get("/")
async def get_selection(workspace: Workspace = Depends(get_workspace)):
    return {"ids": _selected_ids(workspace)}


@router.post("/toggle-all")
async def toggle_all(q: str = "", workspace: Workspace = Depends(get_workspace)):
    """Select every file matching ``q``, or clear the selection if they are all selected already."""
    workspace.toggle_all_files(q)
    return {"ids": _selected_ids(workspace)}


@router.post("/{file_id}/toggle")
async def toggle_file(file_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        selected = workspace.toggle_file(file_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"id": file_id, "selected": selected, "ids": _selected_ids(workspace)}


@router.delete("/")
async def clear_selection(workspace: Workspace = Depends(get_workspace)):
    workspace.selection.clear()
    return {"ids": []}
