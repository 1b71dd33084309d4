"""
Society profile and billing settings schemas.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class BillingSettings(BaseModel):
    """
    Typed view of Society.settings.

    Stored as JSON on the society row; validated on every read and write so
    a malformed document is rejected instead of silently defaulted.
    """

    model_config = {"extra": "forbid"}

    billing_day: int = Field(1, ge=1, le=28)
    due_days: int = Field(15, ge=0, le=365)
    late_fee_percent: float = Field(2, ge=0)
    tenant_parking_multiplier: float = Field(1, ge=1)
    noc_enabled: bool = False
    noc_amount: float = Field(0, ge=0)
    bill_prefix: str = Field("BILL", min_length=1, max_length=10)
    receipt_prefix: str = Field("RCP", min_length=1, max_length=10)

    # all_unpaid: previous due = remaining of every unpaid bill of the flat
    # latest_bill: previous due = remaining of the flat's latest bill only
    carry_forward_mode: str = "all_unpaid"
    allow_overpayment: bool = True

    @field_validator("carry_forward_mode")
    @classmethod
    def validate_carry_forward_mode(cls, v: str) -> str:
        if v not in ("all_unpaid", "latest_bill"):
            raise ValueError("carry_forward_mode must be 'all_unpaid' or 'latest_bill'")
        return v

    @field_validator("bill_prefix", "receipt_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        v = v.strip().upper()
        if not v.isalnum():
            raise ValueError("Prefix must be alphanumeric")
        return v


class BillingSettingsUpdate(BaseModel):
    """Partial update of billing settings."""

    billing_day: Optional[int] = None
    due_days: Optional[int] = None
    late_fee_percent: Optional[float] = None
    tenant_parking_multiplier: Optional[float] = None
    noc_enabled: Optional[bool] = None
    noc_amount: Optional[float] = None
    bill_prefix: Optional[str] = None
    receipt_prefix: Optional[str] = None
    carry_forward_mode: Optional[str] = None
    allow_overpayment: Optional[bool] = None


class SocietyProfileUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    registration_no: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @model_validator(mode="after")
    def check_name(self):
        if self.name is not None and not self.name.strip():
            raise ValueError("Society name cannot be empty")
        return self


class SocietyResponse(BaseModel):
    id: int
    name: str
    slug: str
    address: Optional[str] = None
    registration_no: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}


class SocietyPublicInfo(BaseModel):
    """
    Minimal society info for the public landing page.
    Only shows name and address - no billing data.
    """

    name: str
    slug: str
    address: Optional[str] = None
