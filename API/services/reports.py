"""
Report service - outstanding dues, collection, per-flat ledger, fee
position, income & expense statement and the dashboard summary.

Reports load the society's bills and payments once and aggregate in
memory; a society has at most a few thousand rows per year.
"""

import re
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from database.models import (
    Bill, BillStatus, Building, ChargeType, Expense, Flat, Payment, PaymentMode,
    EXPENSE_CATEGORY_NAMES,
)
from database.base import get_local_now
from services.base import SocietyServiceBase, to_money
from services.ledger import build_ledger


ZERO = Decimal("0.00")
PAYMENT_MODE_LABELS = {
    PaymentMode.CASH.value: "Cash",
    PaymentMode.CHEQUE.value: "Cheque",
    PaymentMode.UPI.value: "UPI",
    PaymentMode.BANK_TRANSFER.value: "Bank Transfer",
}


def flat_sort_key(flat: Flat):
    """A-101 < A-102 < A-1001: order by the numeric part of the flat number."""
    digits = re.sub(r"\D", "", flat.flat_no or "")
    return (int(digits) if digits else 0, flat.flat_no or "")


def financial_year_bounds(fy_start_year: int):
    """Indian financial year: 1 April .. 31 March."""
    return date(fy_start_year, 4, 1), date(fy_start_year + 1, 3, 31)


def current_financial_year(today: date) -> int:
    return today.year if today.month >= 4 else today.year - 1


def _f(value) -> float:
    return float(to_money(value))


def _remaining(bill: Bill) -> Decimal:
    return to_money(bill.grand_total) - to_money(bill.paid_amount)


class ReportService(SocietyServiceBase):

    def _today(self) -> date:
        return get_local_now().date()

    def _group_by_flat(self, rows):
        grouped = defaultdict(list)
        for r in rows:
            grouped[r.flat_id].append(r)
        return grouped

    # ==================== OUTSTANDING ====================

    def get_outstanding_report(self, today: Optional[date] = None) -> dict:
        """Billed vs paid per active flat, with the overdue part of the dues."""
        today = today or self._today()
        flats = self._q(Flat).filter(Flat.is_active == True).all()
        bills_by_flat = self._group_by_flat(self._q(Bill).all())
        payments_by_flat = self._group_by_flat(self._q(Payment).all())

        rows = []
        for flat in flats:
            bills = bills_by_flat.get(flat.id, [])
            payments = payments_by_flat.get(flat.id, [])
            total_billed = sum((to_money(b.grand_total) for b in bills), ZERO)
            total_paid = sum((to_money(p.amount) for p in payments), ZERO)
            outstanding = total_billed - total_paid
            overdue = sum(
                (_remaining(b) for b in bills
                 if b.status != BillStatus.PAID.value and b.due_date < today),
                ZERO,
            )
            if outstanding > 0 or total_billed > 0:
                rows.append({
                    "flat_id": flat.id,
                    "flat_no": flat.flat_no,
                    "owner_name": flat.owner_name,
                    "total_billed": total_billed,
                    "total_paid": total_paid,
                    "outstanding": outstanding,
                    "overdue": overdue,
                })

        rows.sort(key=lambda r: r["outstanding"], reverse=True)

        return {
            "summary": {
                "total_outstanding": _f(sum((r["outstanding"] for r in rows), ZERO)),
                "total_overdue": _f(sum((r["overdue"] for r in rows), ZERO)),
                "flats_with_dues": sum(1 for r in rows if r["outstanding"] > 0),
                "total_flats": self._q(Flat).count(),
            },
            "data": [
                {**r, **{k: _f(r[k]) for k in ("total_billed", "total_paid", "outstanding", "overdue")}}
                for r in rows
            ],
            "as_of": str(today),
        }

    # ==================== COLLECTION ====================

    def get_collection_report(self, date_from: date, date_to: date) -> dict:
        """Payments received between two dates (inclusive), newest first."""
        payments = self._q(Payment).filter(
            Payment.payment_date >= date_from,
            Payment.payment_date <= date_to,
        ).order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

        by_mode = {mode.value: ZERO for mode in PaymentMode}
        for p in payments:
            by_mode[p.payment_mode] = by_mode.get(p.payment_mode, ZERO) + to_money(p.amount)

        total = sum(by_mode.values(), ZERO)
        online = by_mode[PaymentMode.UPI.value] + by_mode[PaymentMode.BANK_TRANSFER.value]

        return {
            "summary": {
                "total_collection": _f(total),
                "by_mode": {k: _f(v) for k, v in by_mode.items()},
                "online": _f(online),
                "count": len(payments),
            },
            "data": [
                {
                    "id": p.id,
                    "receipt_no": p.receipt_no,
                    "payment_date": str(p.payment_date),
                    "flat_id": p.flat_id,
                    "flat_no": p.flat.flat_no if p.flat else None,
                    "owner_name": p.flat.owner_name if p.flat else None,
                    "amount": _f(p.amount),
                    "payment_mode": p.payment_mode,
                    "reference_no": p.reference_no,
                }
                for p in payments
            ],
            "date_from": str(date_from),
            "date_to": str(date_to),
        }

    # ==================== LEDGER ====================

    def get_flat_ledger(self, flat_id: int) -> Optional[dict]:
        flat = self._q(Flat).filter(Flat.id == flat_id).first()
        if not flat:
            return None

        bills = self._q(Bill).filter(Bill.flat_id == flat_id).all()
        payments = self._q(Payment).filter(Payment.flat_id == flat_id).all()
        ledger = build_ledger(bills, payments)

        return {
            "flat": {
                "id": flat.id,
                "flat_no": flat.flat_no,
                "owner_name": flat.owner_name,
                "area": _f(flat.area),
                "occupancy_type": flat.occupancy_type,
            },
            "entries": [e.to_dict() for e in ledger.entries],
            "total_debit": _f(ledger.total_debit),
            "total_credit": _f(ledger.total_credit),
            "outstanding": _f(ledger.balance),
        }

    # ==================== FEE POSITION ====================

    def get_fee_position_report(self, as_of: date, building_id: Optional[int] = None) -> dict:
        """
        Cross-flat, cross-charge-type position as on a date: what each flat
        has been charged per charge type, interest, penalty, carried-forward
        balance and what is still outstanding.
        """
        charge_types = self._q(ChargeType).filter(
            ChargeType.is_active == True
        ).order_by(ChargeType.sort_order, ChargeType.id).all()
        column_index = {c.id: i for i, c in enumerate(charge_types)}

        flats_q = self._q(Flat).filter(Flat.is_active == True)
        if building_id:
            flats_q = flats_q.filter(Flat.building_id == building_id)
        flats = flats_q.all()

        buildings = {b.id: b for b in self._q(Building).all()}

        bills_by_flat = self._group_by_flat(
            b for b in self._q(Bill).all() if b.generated_at.date() <= as_of
        )
        payments_by_flat = self._group_by_flat(
            self._q(Payment).filter(Payment.payment_date <= as_of).all()
        )

        flats_by_building = defaultdict(list)
        for flat in flats:
            flats_by_building[flat.building_id].append(flat)

        # Named buildings alphabetically, unassigned flats last
        group_ids = sorted(
            flats_by_building.keys(),
            key=lambda bid: (bid is None or bid not in buildings,
                             buildings[bid].name if bid in buildings else ""),
        )

        def empty_totals():
            return {
                "charges": [ZERO] * len(charge_types),
                "total": ZERO, "interest": ZERO, "penalty": ZERO,
                "previous_balance": ZERO, "balance": ZERO,
            }

        def add_into(totals, row):
            for i, amt in enumerate(row["charges"]):
                totals["charges"][i] += amt
            for key in ("total", "interest", "penalty", "previous_balance", "balance"):
                totals[key] += row[key]

        def serialize(totals):
            return {
                "charges": [_f(a) for a in totals["charges"]],
                **{k: _f(totals[k]) for k in ("total", "interest", "penalty", "previous_balance", "balance")},
            }

        grand = empty_totals()
        groups = []
        sr_no = 0

        for bid in group_ids:
            building = buildings.get(bid)
            group_totals = empty_totals()
            rows = []

            for flat in sorted(flats_by_building[bid], key=flat_sort_key):
                sr_no += 1
                bills = bills_by_flat.get(flat.id, [])
                payments = payments_by_flat.get(flat.id, [])

                row = empty_totals()
                for bill in bills:
                    for item in bill.line_items:
                        idx = column_index.get(item.charge_type_id)
                        if idx is not None:
                            row["charges"][idx] += to_money(item.amount)
                        row["total"] += to_money(item.amount)
                    row["interest"] += to_money(bill.interest)
                    row["penalty"] += to_money(bill.penalty)
                    if bill.previous_due and bill.previous_due > 0:
                        row["previous_balance"] += to_money(bill.previous_due)

                billed = sum((to_money(b.grand_total) for b in bills), ZERO)
                paid = sum((to_money(p.amount) for p in payments), ZERO)
                row["balance"] = billed - paid

                add_into(group_totals, row)
                add_into(grand, row)
                rows.append({
                    "sr_no": sr_no,
                    "flat_id": flat.id,
                    "flat_no": flat.flat_no,
                    "owner_name": flat.owner_name,
                    **serialize(row),
                })

            groups.append({
                "building_id": bid if building else None,
                "building_name": building.name if building else "Unassigned",
                "rows": rows,
                "totals": serialize(group_totals),
            })

        return {
            "as_of": str(as_of),
            "columns": [{"id": c.id, "name": c.name} for c in charge_types],
            "groups": groups,
            "grand_total": serialize(grand),
        }

    # ==================== INCOME & EXPENSE ====================

    def get_income_expense_report(self, fy_start_year: int) -> dict:
        """Receipts vs expenses for one financial year (April - March)."""
        start, end = financial_year_bounds(fy_start_year)

        payments = self._q(Payment).filter(
            Payment.payment_date >= start,
            Payment.payment_date <= end,
        ).order_by(Payment.payment_date, Payment.id).all()
        expenses = self._q(Expense).filter(
            Expense.expense_date >= start,
            Expense.expense_date <= end,
        ).order_by(Expense.expense_date, Expense.id).all()

        total_income = sum((to_money(p.amount) for p in payments), ZERO)
        total_expense = sum((to_money(e.amount) for e in expenses), ZERO)
        net = total_income - total_expense

        income_by_mode = {mode.value: ZERO for mode in PaymentMode}
        for p in payments:
            income_by_mode[p.payment_mode] = income_by_mode.get(p.payment_mode, ZERO) + to_money(p.amount)

        expense_by_category = {key: ZERO for key in EXPENSE_CATEGORY_NAMES}
        for e in expenses:
            expense_by_category[e.category] = expense_by_category.get(e.category, ZERO) + to_money(e.amount)

        return {
            "financial_year": f"{fy_start_year}-{fy_start_year + 1}",
            "period_start": str(start),
            "period_end": str(end),
            "income": [
                {
                    "date": str(p.payment_date),
                    "description": f"{p.receipt_no} - {p.flat.flat_no if p.flat else 'N/A'}",
                    "amount": _f(p.amount),
                }
                for p in payments
            ],
            "expenses": [
                {
                    "date": str(e.expense_date),
                    "description": e.description,
                    "category": e.category,
                    "amount": _f(e.amount),
                }
                for e in expenses
            ],
            "total_income": _f(total_income),
            "total_expense": _f(total_expense),
            "net_balance": _f(net),
            "is_surplus": net >= 0,
            "income_by_mode": [
                {"mode": k, "label": PAYMENT_MODE_LABELS.get(k, k), "amount": _f(v)}
                for k, v in income_by_mode.items()
            ],
            "expense_by_category": [
                {"category": k, "name": EXPENSE_CATEGORY_NAMES.get(k, k), "amount": _f(v)}
                for k, v in expense_by_category.items()
            ],
        }

    # ==================== DASHBOARD ====================

    def get_dashboard(self, today: Optional[date] = None) -> dict:
        today = today or self._today()
        bills = self._q(Bill).all()

        unpaid = [b for b in bills if b.status != BillStatus.PAID.value]
        total_outstanding = sum((_remaining(b) for b in unpaid), ZERO)
        current_month = sum(
            (_remaining(b) for b in unpaid if b.month == today.month and b.year == today.year),
            ZERO,
        )
        overdue = sum((_remaining(b) for b in unpaid if b.due_date < today), ZERO)

        recent_payments = self._q(Payment).order_by(
            Payment.payment_date.desc(), Payment.id.desc()
        ).limit(5).all()
        recent_bills = self._q(Bill).order_by(
            Bill.generated_at.desc(), Bill.id.desc()
        ).limit(5).all()

        return {
            "active_flats": self._q(Flat).filter(Flat.is_active == True).count(),
            "pending_bills": len(unpaid),
            "total_outstanding": _f(total_outstanding),
            "current_month_outstanding": _f(current_month),
            "overdue": _f(overdue),
            "recent_payments": [
                {
                    "id": p.id,
                    "receipt_no": p.receipt_no,
                    "flat_no": p.flat.flat_no if p.flat else None,
                    "amount": _f(p.amount),
                    "payment_date": str(p.payment_date),
                }
                for p in recent_payments
            ],
            "recent_bills": [
                {
                    "id": b.id,
                    "bill_no": b.bill_no,
                    "flat_no": b.flat.flat_no if b.flat else None,
                    "grand_total": _f(b.grand_total),
                    "status": b.status,
                }
                for b in recent_bills
            ],
        }
