"""
Reports router - outstanding, collection, ledger, fee position,
income & expense and dashboard.
Endpoint: /api/v1/{society_slug}/reports/...
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from database.base import get_local_now
from database.models import Society
from core.dependencies import resolve_society
from services.reports import ReportService, current_financial_year


router = APIRouter()


@router.get("/dashboard", summary="Dashboard")
async def get_dashboard(
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": ReportService(db, society.id).get_dashboard()}


@router.get("/outstanding", summary="Outstanding dues")
async def get_outstanding(
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    return {"success": True, "data": ReportService(db, society.id).get_outstanding_report()}


@router.get("/collection", summary="Collection report")
async def get_collection(
    date_from: date = Query(...),
    date_to: date = Query(...),
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    if date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from must not be after date_to"
        )
    report = ReportService(db, society.id).get_collection_report(date_from, date_to)
    return {"success": True, "data": report}


@router.get("/ledger/{flat_id}", summary="Flat ledger")
async def get_flat_ledger(
    flat_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    ledger = ReportService(db, society.id).get_flat_ledger(flat_id)
    if ledger is None:
        raise HTTPException(status_code=404, detail="Flat not found")
    return {"success": True, "data": ledger}


@router.get("/fee-position", summary="Fee position as on a date")
async def get_fee_position(
    as_of: Optional[date] = Query(None, description="Defaults to today"),
    building_id: Optional[int] = Query(None),
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    as_of = as_of or get_local_now().date()
    report = ReportService(db, society.id).get_fee_position_report(as_of, building_id)
    return {"success": True, "data": report}


@router.get("/income-expense", summary="Income & expense for a financial year")
async def get_income_expense(
    fy: Optional[int] = Query(None, ge=2000, le=2100, description="Start year of the financial year"),
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    fy = fy or current_financial_year(get_local_now().date())
    report = ReportService(db, society.id).get_income_expense_report(fy)
    return {"success": True, "data": report}
