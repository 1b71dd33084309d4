"""
Ledger builder - merges a flat's bills (debits) and payments (credits)
into a date-ordered statement with a running balance.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List

from services.base import to_money


@dataclass
class LedgerEntry:
    date: date
    description: str
    debit: Decimal
    credit: Decimal
    type: str  # bill, payment
    reference_id: int
    balance: Decimal = Decimal("0.00")

    def to_dict(self) -> dict:
        return {
            "date": str(self.date),
            "description": self.description,
            "debit": float(self.debit),
            "credit": float(self.credit),
            "balance": float(self.balance),
            "type": self.type,
            "reference_id": self.reference_id,
        }


@dataclass
class Ledger:
    entries: List[LedgerEntry] = field(default_factory=list)
    total_debit: Decimal = Decimal("0.00")
    total_credit: Decimal = Decimal("0.00")

    @property
    def balance(self) -> Decimal:
        """Outstanding amount: billed minus paid."""
        return to_money(self.total_debit - self.total_credit)


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def build_ledger(bills: Iterable, payments: Iterable) -> Ledger:
    """
    One debit per bill (grand_total, dated when generated) and one credit
    per payment (dated payment_date), sorted by date. Entries on the same
    date keep bills before payments. The final running balance equals
    sum(grand_total) - sum(amount).
    """
    entries = []

    for b in bills:
        entries.append(LedgerEntry(
            date=_as_date(b.generated_at),
            description=f"Bill - {calendar.month_name[b.month]} {b.year} ({b.bill_no})",
            debit=to_money(b.grand_total),
            credit=Decimal("0.00"),
            type="bill",
            reference_id=b.id,
        ))

    for p in payments:
        entries.append(LedgerEntry(
            date=_as_date(p.payment_date),
            description=f"Payment - {p.receipt_no} ({p.payment_mode})",
            debit=Decimal("0.00"),
            credit=to_money(p.amount),
            type="payment",
            reference_id=p.id,
        ))

    # sort is stable: bills were appended first
    entries.sort(key=lambda e: e.date)

    ledger = Ledger(entries=entries)
    balance = Decimal("0.00")
    for e in entries:
        balance = balance + e.debit - e.credit
        e.balance = balance
        ledger.total_debit += e.debit
        ledger.total_credit += e.credit

    return ledger
