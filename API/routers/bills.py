"""
Bills router - monthly bill generation and bill management.
Endpoint: /api/v1/{society_slug}/bills/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society
from core.dependencies import resolve_society, get_billing_settings, raise_for_message
from schemas.billing import (
    BillListResponse, BillResponse, GenerateBillsRequest, GenerateBillsResponse,
)
from schemas.settings import BillingSettings
from services.billing import BillingService


router = APIRouter()


@router.get("", response_model=BillListResponse, summary="List bills")
async def get_bills(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    flat_id: Optional[int] = Query(None),
    building_id: Optional[int] = Query(None),
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    service = BillingService(db, society.id)
    bills = service.get_bills(month, year, status_filter, flat_id, building_id)
    return BillListResponse(
        data=[BillResponse.model_validate(b) for b in bills],
        count=len(bills)
    )


@router.post(
    "/generate",
    response_model=GenerateBillsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate bills for a month"
)
async def generate_bills(
    body: GenerateBillsRequest,
    society: Society = Depends(resolve_society),
    billing_settings: BillingSettings = Depends(get_billing_settings),
    db: Session = Depends(get_db)
):
    """
    Generate bills for all active flats (or one flat) for a month.
    Flats that already have a bill for the month are skipped.
    """
    service = BillingService(db, society.id)
    ok, msg, result = service.generate_bills(
        month=body.month,
        year=body.year,
        settings=billing_settings,
        flat_id=body.flat_id,
        skip_existing=body.skip_existing,
    )
    if not ok:
        raise_for_message(msg)

    return GenerateBillsResponse(
        message=msg,
        generated_count=len(result["generated"]),
        skipped_flat_ids=result["skipped_flat_ids"],
        data=[BillResponse.model_validate(b) for b in result["generated"]],
    )


@router.get("/{bill_id}", response_model=BillResponse, summary="Bill detail")
async def get_bill(
    bill_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    bill = BillingService(db, society.id).get_bill(bill_id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@router.delete("/{bill_id}", summary="Delete bill")
async def delete_bill(
    bill_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    """Delete a bill. Bills with recorded payments cannot be deleted."""
    ok, msg = BillingService(db, society.id).delete_bill(bill_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}
