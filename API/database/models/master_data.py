"""
Master data models: buildings, flat types and charge types.
Society-scoped.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, Boolean, Text, Numeric,
    Index, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship

from ..base import SocietyBaseModel


class CalculationType(PyEnum):
    """How a charge type turns into an amount on a bill."""
    FIXED = "fixed"
    PER_SQFT = "per_sqft"
    PER_VEHICLE = "per_vehicle"


class VehicleType(PyEnum):
    TWO_WHEELER = "2wheeler"
    FOUR_WHEELER = "4wheeler"


class Building(SocietyBaseModel):
    """A wing / block of the society."""

    __tablename__ = 'buildings'

    name = Column(String(200), nullable=False)
    total_floors = Column(Integer, nullable=True)
    address = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    flats = relationship("Flat", back_populates="building", lazy="dynamic")

    __table_args__ = (
        UniqueConstraint('society_id', 'name', name='uq_building_society_name'),
    )


class FlatType(SocietyBaseModel):
    """Flat layout (1 BHK, 2 BHK, Shop...) with a default carpet area."""

    __tablename__ = 'flat_types'

    name = Column(String(100), nullable=False)
    default_area = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint('society_id', 'name', name='uq_flat_type_society_name'),
    )


class ChargeType(SocietyBaseModel):
    """
    Reusable billing rule applied to every flat when bills are generated.

    calculation_type:
    - fixed:       default_amount per flat
    - per_sqft:    flat.area * default_amount
    - per_vehicle: vehicle count (by vehicle_type) * default_amount
    """

    __tablename__ = 'charge_types'

    name = Column(String(200), nullable=False)
    calculation_type = Column(String(20), default='fixed', nullable=False)
    default_amount = Column(Numeric(14, 4), default=0, nullable=False)  # rate; line amounts are rounded
    vehicle_type = Column(String(20), nullable=True)  # 2wheeler, 4wheeler
    is_monthly = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index('ix_charge_types_society_active', 'society_id', 'is_active'),
        CheckConstraint('default_amount >= 0', name='ck_charge_type_amount_non_negative'),
    )
