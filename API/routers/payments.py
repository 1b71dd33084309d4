"""
Payments router - receipts recorded against flats and bills.
Endpoint: /api/v1/{society_slug}/payments/...
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from database.models import Society
from core.dependencies import resolve_society, get_billing_settings, raise_for_message
from schemas.billing import PaymentCreate, PaymentListResponse, PaymentResponse
from schemas.settings import BillingSettings
from services.base import to_money
from services.payments import PaymentService


router = APIRouter()


@router.get("", response_model=PaymentListResponse, summary="List payments")
async def get_payments(
    flat_id: Optional[int] = Query(None),
    bill_id: Optional[int] = Query(None),
    payment_mode: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    service = PaymentService(db, society.id)
    payments = service.get_payments(flat_id, bill_id, payment_mode, date_from, date_to)
    total = sum(to_money(p.amount) for p in payments)
    return PaymentListResponse(
        data=[PaymentResponse.model_validate(p) for p in payments],
        count=len(payments),
        total_amount=float(total)
    )


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record payment")
async def add_payment(
    body: PaymentCreate,
    society: Society = Depends(resolve_society),
    billing_settings: BillingSettings = Depends(get_billing_settings),
    db: Session = Depends(get_db)
):
    """Record a payment; when bill_id is given the bill is updated in the same transaction."""
    service = PaymentService(db, society.id)
    ok, msg, payment = service.add_payment(
        flat_id=body.flat_id,
        amount=body.amount,
        payment_date=body.payment_date,
        settings=billing_settings,
        payment_mode=body.payment_mode,
        bill_id=body.bill_id,
        reference_no=body.reference_no,
        remarks=body.remarks,
    )
    if not ok:
        raise_for_message(msg)
    return {
        "success": True,
        "message": msg,
        "data": PaymentResponse.model_validate(payment),
    }


@router.get("/{payment_id}", response_model=PaymentResponse, summary="Payment detail")
async def get_payment(
    payment_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    payment = PaymentService(db, society.id).get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.get("/{payment_id}/receipt", summary="Printable receipt")
async def get_receipt(
    payment_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    receipt = PaymentService(db, society.id).get_receipt(payment_id, society)
    if not receipt:
        raise HTTPException(status_code=404, detail="Payment not found")
    return receipt


@router.delete("/{payment_id}", summary="Delete payment")
async def delete_payment(
    payment_id: int,
    society: Society = Depends(resolve_society),
    db: Session = Depends(get_db)
):
    """Delete a payment and reverse its effect on the linked bill."""
    ok, msg = PaymentService(db, society.id).delete_payment(payment_id)
    if not ok:
        raise_for_message(msg)
    return {"success": True, "message": msg}
