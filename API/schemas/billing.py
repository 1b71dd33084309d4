"""
Bill and payment schemas.
"""

from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from database.models import PaymentMode


# ==================== BILLS ====================

class GenerateBillsRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    flat_id: Optional[int] = None
    # Flats already billed for the period are skipped; with False their
    # presence aborts the whole run.
    skip_existing: bool = True


class BillLineItemResponse(BaseModel):
    charge_type_id: Optional[int] = None
    code: Optional[str] = None
    description: str
    amount: float

    model_config = {"from_attributes": True}


class BillResponse(BaseModel):
    id: int
    bill_no: str
    flat_id: int
    month: int
    year: int
    line_items: List[BillLineItemResponse]
    total_amount: float
    previous_due: float
    interest: float
    penalty: float
    grand_total: float
    paid_amount: float
    status: str
    due_date: date
    generated_at: datetime

    model_config = {"from_attributes": True}


class BillListResponse(BaseModel):
    data: List[BillResponse]
    count: int


class GenerateBillsResponse(BaseModel):
    success: bool = True
    message: str
    generated_count: int
    skipped_flat_ids: List[int]
    data: List[BillResponse]


# ==================== PAYMENTS ====================

class PaymentCreate(BaseModel):
    model_config = {"use_enum_values": True}

    flat_id: int
    bill_id: Optional[int] = None
    amount: Decimal = Field(..., gt=0)
    payment_mode: PaymentMode = PaymentMode.CASH.value
    payment_date: date
    reference_no: Optional[str] = Field(None, max_length=100)
    remarks: Optional[str] = None

    @field_validator("reference_no", "remarks")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class PaymentResponse(BaseModel):
    id: int
    receipt_no: str
    flat_id: int
    bill_id: Optional[int] = None
    amount: float
    payment_mode: str
    payment_date: date
    reference_no: Optional[str] = None
    remarks: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentListResponse(BaseModel):
    data: List[PaymentResponse]
    count: int
    total_amount: float
