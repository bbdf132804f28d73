from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError as PayloadError

from backoffice.application import get_reconciliation_service
from backoffice.core.csvio import work_item_to_row
from backoffice.core.schema import WorkItemRecord
from backoffice.core.validation import ValidationError

router = APIRouter(prefix="/admin/tasks", tags=["tasks"])


@router.get("")
async def list_tasks() -> dict:
    service = get_reconciliation_service()
    return {"items": [work_item_to_row(item) for item in service.list_active_work_items()]}


@router.post("")
async def create_task(payload: dict) -> dict:
    try:
        record = WorkItemRecord(**payload)
    except PayloadError as exc:
        raise HTTPException(status_code=400, detail=exc.errors(include_url=False, include_context=False)) from exc
    service = get_reconciliation_service()
    item = service.register_work_item(record)
    return work_item_to_row(item)


@router.get("/duplicates")
async def get_duplicates() -> dict:
    """Report active work items sharing business, task type and status."""
    service = get_reconciliation_service()
    return service.get_duplicates_report()


@router.delete("/duplicates")
async def delete_duplicates(payload: dict) -> dict:
    """Soft-delete the selected work items; per-item failures are reported, not raised."""
    service = get_reconciliation_service()
    try:
        summary = service.soft_delete(payload.get("taskIds"))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return summary.to_payload()


@router.post("/duplicates/resolve")
async def resolve_duplicates() -> dict:
    service = get_reconciliation_service()
    summary = service.resolve_duplicates()
    if summary is None:
        return {"success": 0, "failed": 0}
    return summary.to_payload()
