"""
Society model for multi-tenancy.
Each society is one housing complex with its own flats, bills and payments.
"""

from sqlalchemy import (
    Column, String, Boolean, Text, JSON, Index
)

from ..base import BaseModel


class Society(BaseModel):
    """
    Society (tenant) - one housing complex.

    Each society has its own:
    - Buildings, flat types, charge types
    - Flats
    - Bills, payments, expenses
    - Billing settings

    Data isolation is enforced via society_id on all related models.
    """

    __tablename__ = 'societies'

    # Basic info
    name = Column(String(300), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)

    # Letterhead (printed on bills, receipts and reports)
    address = Column(Text, nullable=True)
    registration_no = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)

    # Billing settings (JSON), validated by schemas.settings.BillingSettings
    settings = Column(JSON, default=dict, nullable=False)
    # Example settings:
    # {
    #   "billing_day": 1,
    #   "due_days": 15,
    #   "tenant_parking_multiplier": 2,
    #   "noc_enabled": true,
    #   "noc_amount": 500,
    #   "bill_prefix": "BILL",
    #   "receipt_prefix": "RCP"
    # }

    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index('ix_societies_is_active', 'is_active'),
    )

    def __repr__(self):
        return f"<Society(id={self.id}, name='{self.name}', slug='{self.slug}')>"
