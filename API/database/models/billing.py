"""
Bill and Payment models - monthly maintenance bills per flat and the
payments (receipts) recorded against them.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, Text, Numeric,
    DateTime, Date, ForeignKey, Index, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship

from ..base import SocietyBaseModel, get_local_now


class BillStatus(PyEnum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentMode(PyEnum):
    CASH = "cash"
    CHEQUE = "cheque"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"


class Bill(SocietyBaseModel):
    """
    One billing period's invoice for one flat.

    grand_total = total_amount + previous_due + interest + penalty.
    Only paid_amount and status change after generation (payment add/delete).
    """

    __tablename__ = 'bills'

    bill_no = Column(String(50), nullable=False, index=True)
    sequence_no = Column(Integer, nullable=False)  # per (year, month)
    flat_id = Column(Integer, ForeignKey('flats.id'), nullable=False, index=True)

    # Period
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    # Amounts
    total_amount = Column(Numeric(14, 2), default=0, nullable=False)
    previous_due = Column(Numeric(14, 2), default=0, nullable=False)
    interest = Column(Numeric(14, 2), default=0, nullable=False)
    penalty = Column(Numeric(14, 2), default=0, nullable=False)
    grand_total = Column(Numeric(14, 2), default=0, nullable=False)
    paid_amount = Column(Numeric(14, 2), default=0, nullable=False)

    status = Column(String(20), default='pending', nullable=False)  # pending, partial, paid
    due_date = Column(Date, nullable=False)
    generated_at = Column(DateTime, default=get_local_now, nullable=False)

    # Relationships
    flat = relationship("Flat", back_populates="bills")
    line_items = relationship(
        "BillLineItem",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillLineItem.position",
    )
    payments = relationship("Payment", back_populates="bill")

    __table_args__ = (
        UniqueConstraint('society_id', 'flat_id', 'month', 'year', name='uq_bill_society_flat_period'),
        UniqueConstraint('society_id', 'bill_no', name='uq_bill_society_bill_no'),
        Index('ix_bills_society_period', 'society_id', 'year', 'month'),
        Index('ix_bills_society_status', 'society_id', 'status'),
        CheckConstraint('month >= 1 AND month <= 12', name='ck_bill_month_range'),
    )

    @property
    def balance(self):
        """Remaining amount on this bill (negative when over-paid)."""
        return (self.grand_total or 0) - (self.paid_amount or 0)


class BillLineItem(SocietyBaseModel):
    """One computed charge on a bill, in display order."""

    __tablename__ = 'bill_line_items'

    bill_id = Column(Integer, ForeignKey('bills.id', ondelete='CASCADE'), nullable=False, index=True)
    charge_type_id = Column(Integer, ForeignKey('charge_types.id'), nullable=True, index=True)
    code = Column(String(30), nullable=True)  # "noc" for non-occupancy charges
    description = Column(String(300), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    position = Column(Integer, default=0, nullable=False)

    bill = relationship("Bill", back_populates="line_items")


class Payment(SocietyBaseModel):
    """
    Money received from a flat. bill_id is NULL for advance / unallocated
    payments.
    """

    __tablename__ = 'payments'

    receipt_no = Column(String(50), nullable=False, index=True)
    sequence_no = Column(Integer, nullable=False)  # per payment (year, month)
    flat_id = Column(Integer, ForeignKey('flats.id'), nullable=False, index=True)
    bill_id = Column(Integer, ForeignKey('bills.id'), nullable=True, index=True)

    amount = Column(Numeric(14, 2), nullable=False)
    payment_mode = Column(String(30), default='cash', nullable=False)  # cash, cheque, upi, bank_transfer
    payment_date = Column(Date, nullable=False)
    reference_no = Column(String(100), nullable=True)  # cheque no / UTR
    remarks = Column(Text, nullable=True)

    # Relationships
    flat = relationship("Flat", back_populates="payments")
    bill = relationship("Bill", back_populates="payments")

    __table_args__ = (
        UniqueConstraint('society_id', 'receipt_no', name='uq_payment_society_receipt_no'),
        Index('ix_payments_society_date', 'society_id', 'payment_date'),
        CheckConstraint('amount > 0', name='ck_payment_amount_positive'),
    )
