"""
Flat schemas.
"""

from typing import ClassVar, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from schemas.base import PartialUpdate
from database.models import OccupancyType


class FlatCreate(BaseModel):
    model_config = {"use_enum_values": True}

    flat_no: str = Field(..., min_length=1, max_length=50)
    building_id: int
    flat_type_id: int
    area: Decimal = Field(..., gt=0)
    owner_name: str = Field(..., min_length=1, max_length=200)
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    occupancy_type: OccupancyType = OccupancyType.OWNER.value
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    two_wheeler_count: int = Field(0, ge=0)
    four_wheeler_count: int = Field(0, ge=0)
    is_active: bool = True

    @field_validator("flat_no", "owner_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v


class FlatUpdate(PartialUpdate):
    model_config = {"use_enum_values": True}
    non_nullable_fields: ClassVar[Tuple[str, ...]] = (
        "flat_no", "area", "owner_name", "occupancy_type",
        "two_wheeler_count", "four_wheeler_count", "is_active",
    )

    flat_no: Optional[str] = None
    building_id: Optional[int] = None
    flat_type_id: Optional[int] = None
    area: Optional[Decimal] = Field(None, gt=0)
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    occupancy_type: Optional[OccupancyType] = None
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    two_wheeler_count: Optional[int] = Field(None, ge=0)
    four_wheeler_count: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class FlatResponse(BaseModel):
    id: int
    flat_no: str
    building_id: Optional[int] = None
    flat_type_id: Optional[int] = None
    area: float
    owner_name: str
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    occupancy_type: str
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    two_wheeler_count: int
    four_wheeler_count: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class FlatListResponse(BaseModel):
    data: List[FlatResponse]
    count: int
