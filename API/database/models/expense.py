"""
Expense model - money spent by the society (income/expense statement).
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Text, Numeric, Date, Index, CheckConstraint
)

from ..base import SocietyBaseModel


class ExpenseCategory(PyEnum):
    ELECTRICITY = "electricity"
    WATER = "water"
    SECURITY = "security"
    HOUSEKEEPING = "housekeeping"
    REPAIRS = "repairs"
    SALARY = "salary"
    LIFT = "lift"
    INSURANCE = "insurance"
    LEGAL = "legal"
    ADMINISTRATION = "administration"
    OTHER = "other"


EXPENSE_CATEGORY_NAMES = {
    ExpenseCategory.ELECTRICITY.value: "Electricity",
    ExpenseCategory.WATER.value: "Water Supply",
    ExpenseCategory.SECURITY.value: "Security",
    ExpenseCategory.HOUSEKEEPING.value: "Housekeeping",
    ExpenseCategory.REPAIRS.value: "Repairs & Maintenance",
    ExpenseCategory.SALARY.value: "Staff Salary",
    ExpenseCategory.LIFT.value: "Lift Maintenance",
    ExpenseCategory.INSURANCE.value: "Insurance",
    ExpenseCategory.LEGAL.value: "Legal & Professional",
    ExpenseCategory.ADMINISTRATION.value: "Administration",
    ExpenseCategory.OTHER.value: "Other",
}


class Expense(SocietyBaseModel):
    """A single society expense voucher."""

    __tablename__ = 'expenses'

    expense_date = Column(Date, nullable=False)
    category = Column(String(30), nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    paid_to = Column(String(200), nullable=True)
    payment_mode = Column(String(30), default='cash', nullable=False)
    receipt_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index('ix_expenses_society_date', 'society_id', 'expense_date'),
        CheckConstraint('amount > 0', name='ck_expense_amount_positive'),
    )
