"""
Expense schemas.
"""

from typing import ClassVar, List, Optional, Tuple
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from schemas.base import PartialUpdate
from database.models import ExpenseCategory, PaymentMode


class ExpenseCreate(BaseModel):
    model_config = {"use_enum_values": True}

    expense_date: date
    category: ExpenseCategory
    description: str = Field(..., min_length=1, max_length=500)
    amount: Decimal = Field(..., gt=0)
    paid_to: Optional[str] = None
    payment_mode: PaymentMode = PaymentMode.CASH.value
    receipt_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a description")
        return v


class ExpenseUpdate(PartialUpdate):
    model_config = {"use_enum_values": True}
    non_nullable_fields: ClassVar[Tuple[str, ...]] = (
        "expense_date", "category", "description", "amount", "payment_mode",
    )

    expense_date: Optional[date] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    paid_to: Optional[str] = None
    payment_mode: Optional[PaymentMode] = None
    receipt_number: Optional[str] = None
    notes: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: int
    expense_date: date
    category: str
    description: str
    amount: float
    paid_to: Optional[str] = None
    payment_mode: str
    receipt_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ExpenseListResponse(BaseModel):
    data: List[ExpenseResponse]
    count: int
    total_amount: float
