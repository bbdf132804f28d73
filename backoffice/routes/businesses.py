from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, BackgroundTasks, HTTPException
from pydantic import ValidationError as PayloadError

from backoffice.application import get_cost_service, get_receivables_service
from backoffice.core.schema import BusinessRecord, CostMutationRequest
from backoffice.core.validation import ValidationError
from backoffice.infrastructure import RecordNotFoundError

router = APIRouter(tags=["businesses"])


@router.post("/businesses")
async def upsert_business(payload: dict) -> dict:
    try:
        record = BusinessRecord(**payload)
    except PayloadError as exc:
        raise HTTPException(status_code=400, detail=exc.errors(include_url=False, include_context=False)) from exc
    service = get_receivables_service()
    financials = service.register_business(record)
    return {"business_id": financials.business_id, "total_revenue_with_tax": str(financials.total_revenue_with_tax)}


@router.get("/businesses/{business_id}/receivables")
async def get_business_receivables(business_id: str) -> dict:
    service = get_receivables_service()
    try:
        result = service.get_receivable(business_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail="business not found") from exc
    return result.model_dump(mode="json")


@router.get("/receivables")
async def list_receivables() -> dict:
    service = get_receivables_service()
    return service.list_receivables()


@router.put("/businesses/{business_id}/costs/{cost_type}")
async def update_business_cost(
    business_id: str,
    cost_type: str,
    payload: dict,
    background_tasks: BackgroundTasks,
) -> dict:
    """Apply a cost mutation; its change memo is written after the response."""
    try:
        request = CostMutationRequest(**payload)
    except PayloadError as exc:
        raise HTTPException(status_code=400, detail=exc.errors(include_url=False, include_context=False)) from exc

    service = get_cost_service()
    try:
        change = service.apply_cost_change(business_id, cost_type, request)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail="business not found") from exc

    background_tasks.add_task(service.change_logger.log_cost_change, business_id, change, request.author)
    return {"business_id": business_id, "change": change.model_dump(mode="json")}


@router.get("/businesses/{business_id}/memos")
async def list_business_memos(business_id: str) -> dict:
    service = get_cost_service()
    try:
        memos = service.list_memos(business_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail="business not found") from exc
    return {"items": [{**asdict(memo), "created_at": memo.created_at.isoformat()} for memo in memos]}
