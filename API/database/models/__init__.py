"""
Database models package.
Export all models for easy importing.
"""

# Society (MUST be imported first - other models depend on it)
from .society import Society

# Master data
from .master_data import (
    Building,
    FlatType,
    ChargeType,
    CalculationType,
    VehicleType,
)

# Flats
from .flat import (
    Flat,
    OccupancyType,
)

# Bills and payments
from .billing import (
    Bill,
    BillLineItem,
    BillStatus,
    Payment,
    PaymentMode,
)

# Expenses
from .expense import (
    Expense,
    ExpenseCategory,
    EXPENSE_CATEGORY_NAMES,
)


__all__ = [
    # Society
    'Society',

    # Master data
    'Building',
    'FlatType',
    'ChargeType',
    'CalculationType',
    'VehicleType',

    # Flats
    'Flat',
    'OccupancyType',

    # Billing
    'Bill',
    'BillLineItem',
    'BillStatus',
    'Payment',
    'PaymentMode',

    # Expenses
    'Expense',
    'ExpenseCategory',
    'EXPENSE_CATEGORY_NAMES',
]
