"""Customer Routes"""
from fastapi import APIRouter, HTTPException, Depends

from backend.state import get_workspace
from backend.utils import customer_to_dict
from report_engine.errors import RecordNotFoundError
from report_engine.schemas import CustomerFields, CustomerRecord
from report_engine.workspace import Workspace

router = APIRouter()


def _customer_to_dict(customer: CustomerRecord, workspace: Workspace) -> dict:
    return customer_to_dict(customer, selected=customer.id in workspace.customers.selection)


@router.get("/")
async def list_customers(workspace: Workspace = Depends(get_workspace)):
    return [_customer_to_dict(c, workspace) for c in workspace.customers.all()]


@router.post("/")
async def create_customer(payload: CustomerFields, workspace: Workspace = Depends(get_workspace)):
    customer = workspace.customers.add(payload)
    return _customer_to_dict(customer, workspace)


@router.put("/{customer_id}")
async def update_customer(customer_id: str, payload: CustomerFields, workspace: Workspace = Depends(get_workspace)):
    try:
        customer = workspace.customers.update(customer_id, payload)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _customer_to_dict(customer, workspace)


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str, workspace: Workspace = Depends(get_workspace)):
    if not workspace.customers.remove([customer_id]):
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
    return {"status": "deleted", "ids": [customer_id]}


@router.post("/{customer_id}/toggle")
async def toggle_customer(customer_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        workspace.customers.get(customer_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    selected = workspace.customers.selection.toggle(customer_id)
    return {"id": customer_id, "selected": selected}
