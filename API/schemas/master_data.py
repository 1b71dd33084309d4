"""
Buildings, flat types and charge types schemas.
"""

from typing import ClassVar, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator, model_validator

from schemas.base import PartialUpdate
from database.models import CalculationType, VehicleType


class BuildingCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    total_floors: Optional[int] = Field(None, ge=0)
    address: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter building name")
        return v


class BuildingUpdate(PartialUpdate):
    non_nullable_fields: ClassVar[Tuple[str, ...]] = ("name", "is_active")

    name: Optional[str] = None
    total_floors: Optional[int] = Field(None, ge=0)
    address: Optional[str] = None
    is_active: Optional[bool] = None


class BuildingResponse(BaseModel):
    id: int
    name: str
    total_floors: Optional[int] = None
    address: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class FlatTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    default_area: Optional[Decimal] = Field(None, ge=0)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter flat type name")
        return v


class FlatTypeUpdate(PartialUpdate):
    non_nullable_fields: ClassVar[Tuple[str, ...]] = ("name", "is_active")

    name: Optional[str] = None
    default_area: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None


class FlatTypeResponse(BaseModel):
    id: int
    name: str
    default_area: Optional[float] = None
    is_active: bool

    model_config = {"from_attributes": True}


def check_vehicle_type_rule(calculation_type: Optional[str], vehicle_type: Optional[str]):
    if calculation_type == CalculationType.PER_VEHICLE.value and not vehicle_type:
        raise ValueError("vehicle_type is required for per_vehicle charges")


class ChargeTypeCreate(BaseModel):
    model_config = {"use_enum_values": True}

    name: str = Field(..., min_length=1, max_length=200)
    calculation_type: CalculationType = CalculationType.FIXED.value
    default_amount: Decimal = Field(..., ge=0)
    vehicle_type: Optional[VehicleType] = None
    is_monthly: bool = True
    is_active: bool = True
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter charge type name")
        return v

    @model_validator(mode="after")
    def check_vehicle_type(self):
        check_vehicle_type_rule(self.calculation_type, self.vehicle_type)
        return self


class ChargeTypeUpdate(PartialUpdate):
    model_config = {"use_enum_values": True}
    non_nullable_fields: ClassVar[Tuple[str, ...]] = (
        "name", "calculation_type", "default_amount", "is_monthly", "is_active", "sort_order",
    )

    name: Optional[str] = None
    calculation_type: Optional[CalculationType] = None
    default_amount: Optional[Decimal] = Field(None, ge=0)
    vehicle_type: Optional[VehicleType] = None
    is_monthly: Optional[bool] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class ChargeTypeResponse(BaseModel):
    id: int
    name: str
    calculation_type: str
    default_amount: float
    vehicle_type: Optional[str] = None
    is_monthly: bool
    is_active: bool
    sort_order: int

    model_config = {"from_attributes": True}


class MasterDataResponse(BaseModel):
    buildings: List[BuildingResponse]
    flat_types: List[FlatTypeResponse]
    charge_types: List[ChargeTypeResponse]
