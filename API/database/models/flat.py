"""
Flat model - a billable unit (apartment or shop) within a society.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, Boolean, Numeric,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ..base import SocietyBaseModel


class OccupancyType(PyEnum):
    OWNER = "owner"
    TENANT = "tenant"
    VACANT = "vacant"


class Flat(SocietyBaseModel):
    """Billable unit. Area and vehicle counts feed the charge calculator."""

    __tablename__ = 'flats'

    flat_no = Column(String(50), nullable=False)
    building_id = Column(Integer, ForeignKey('buildings.id'), nullable=True, index=True)
    flat_type_id = Column(Integer, ForeignKey('flat_types.id'), nullable=True, index=True)
    area = Column(Numeric(10, 2), default=0, nullable=False)  # sq.ft

    # Owner
    owner_name = Column(String(200), nullable=False)
    owner_phone = Column(String(20), nullable=True)
    owner_email = Column(String(255), nullable=True)

    # Occupancy
    occupancy_type = Column(String(20), default='owner', nullable=False)  # owner, tenant, vacant
    tenant_name = Column(String(200), nullable=True)
    tenant_phone = Column(String(20), nullable=True)

    # Parking (vehicles parked inside the premises)
    two_wheeler_count = Column(Integer, default=0, nullable=False)
    four_wheeler_count = Column(Integer, default=0, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    building = relationship("Building", back_populates="flats")
    flat_type = relationship("FlatType")
    bills = relationship("Bill", back_populates="flat", lazy="dynamic")
    payments = relationship("Payment", back_populates="flat", lazy="dynamic")

    __table_args__ = (
        Index('ix_flats_society_active', 'society_id', 'is_active'),
        CheckConstraint('area >= 0', name='ck_flat_area_non_negative'),
        CheckConstraint('two_wheeler_count >= 0', name='ck_flat_two_wheeler_non_negative'),
        CheckConstraint('four_wheeler_count >= 0', name='ck_flat_four_wheeler_non_negative'),
    )
