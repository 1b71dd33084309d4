"""
Billing service - monthly bill generation, listing and deletion.

Bill generation runs the charge calculator over every active flat for a
(month, year), carries forward unpaid balances and numbers the bills
sequentially per period. All bills of one run are written in a single
transaction.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from database.models import (
    Bill, BillLineItem, BillStatus, ChargeType, Flat, Payment,
)
from database.base import get_local_now
from schemas.settings import BillingSettings
from services.base import SocietyServiceBase, to_money
from services.charges import calculate_charges


# ==================== HELPERS ====================

def resolve_status(paid_amount, grand_total) -> str:
    """
    Three-state bill status:
    paid    when paid_amount >= grand_total (over-payment included)
    partial when 0 < paid_amount < grand_total
    pending when nothing is paid
    """
    paid = to_money(paid_amount)
    total = to_money(grand_total)
    if paid <= 0:
        return BillStatus.PENDING.value
    if paid >= total:
        return BillStatus.PAID.value
    return BillStatus.PARTIAL.value


def format_document_number(prefix: str, year: int, month: int, sequence: int) -> str:
    """BILL-2024-03-0001 / RCP-2024-03-0001"""
    return f"{prefix}-{year}-{month:02d}-{sequence:04d}"


def compute_due_date(year: int, month: int, billing_day: int, due_days: int) -> date:
    return date(year, month, billing_day) + timedelta(days=due_days)


def calculate_previous_due(
    bills: Iterable[Bill], mode: str = "all_unpaid",
    month: Optional[int] = None, year: Optional[int] = None,
) -> Decimal:
    """
    Arrears carried onto a new bill from a flat's existing bills.

    all_unpaid:  sum of (grand_total - paid_amount) over every bill whose
                 status is not paid.
    latest_bill: remaining balance of the most recent bill before
                 (year, month) only; that bill already carries older arrears.
    """
    bills = list(bills)
    if mode == "latest_bill":
        earlier = [
            b for b in bills
            if year is None or (b.year, b.month) < (year, month)
        ]
        if not earlier:
            return Decimal("0.00")
        latest = max(earlier, key=lambda b: (b.year, b.month))
        if latest.status == BillStatus.PAID.value:
            return Decimal("0.00")
        return to_money(to_money(latest.grand_total) - to_money(latest.paid_amount))

    return to_money(sum(
        (to_money(b.grand_total) - to_money(b.paid_amount)
         for b in bills if b.status != BillStatus.PAID.value),
        Decimal("0"),
    ))


# ==================== SERVICE ====================

class BillingService(SocietyServiceBase):
    """Bill generation and bill management for one society."""

    # ---------- queries ----------

    def get_bill(self, bill_id: int) -> Optional[Bill]:
        return self._q(Bill).filter(Bill.id == bill_id).first()

    def get_bills(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[str] = None,
        flat_id: Optional[int] = None,
        building_id: Optional[int] = None,
    ) -> List[Bill]:
        q = self._q(Bill)
        if month:
            q = q.filter(Bill.month == month)
        if year:
            q = q.filter(Bill.year == year)
        if status:
            q = q.filter(Bill.status == status)
        if flat_id:
            q = q.filter(Bill.flat_id == flat_id)
        if building_id:
            q = q.join(Flat, Flat.id == Bill.flat_id).filter(Flat.building_id == building_id)
        return q.order_by(Bill.year.desc(), Bill.month.desc(), Bill.sequence_no).all()

    def get_active_monthly_charge_types(self) -> List[ChargeType]:
        return self._q(ChargeType).filter(
            ChargeType.is_active == True,
            ChargeType.is_monthly == True,
        ).order_by(ChargeType.sort_order, ChargeType.id).all()

    def _next_sequence(self, year: int, month: int) -> int:
        current = self._q(Bill).with_entities(func.max(Bill.sequence_no)).filter(
            Bill.year == year,
            Bill.month == month,
        ).scalar()
        return (current or 0) + 1

    # ---------- generation ----------

    def generate_bills(
        self,
        month: int,
        year: int,
        settings: BillingSettings,
        flat_id: Optional[int] = None,
        skip_existing: bool = True,
    ) -> Tuple[bool, str, dict]:
        """
        Generate bills for every active flat (or one flat) for a period.

        Returns (ok, message, {"generated": [Bill], "skipped_flat_ids": [int]}).
        Nothing is written when ok is False.
        """
        result = {"generated": [], "skipped_flat_ids": []}

        flats_q = self._q(Flat).filter(Flat.is_active == True)
        if flat_id:
            flats_q = flats_q.filter(Flat.id == flat_id)
        flats = flats_q.order_by(Flat.building_id, Flat.id).all()

        if not flats:
            return False, "No active flats to generate bills for", result

        flat_ids = [f.id for f in flats]
        existing_flat_ids = {
            row[0] for row in self._q(Bill).with_entities(Bill.flat_id).filter(
                Bill.month == month,
                Bill.year == year,
                Bill.flat_id.in_(flat_ids),
            ).all()
        }

        if existing_flat_ids:
            if not skip_existing:
                return (
                    False,
                    f"{len(existing_flat_ids)} bill(s) already exist for this period",
                    result,
                )
            result["skipped_flat_ids"] = sorted(existing_flat_ids)
            flats = [f for f in flats if f.id not in existing_flat_ids]

        if not flats:
            return True, "All selected flats already have bills for this period", result

        charge_types = self.get_active_monthly_charge_types()
        due_date = compute_due_date(year, month, settings.billing_day, settings.due_days)
        sequence = self._next_sequence(year, month)
        now = get_local_now()

        for flat in flats:
            charges = calculate_charges(flat, charge_types, settings)

            history = self._q(Bill).filter(Bill.flat_id == flat.id).all()
            previous_due = calculate_previous_due(
                history, settings.carry_forward_mode, month=month, year=year
            )

            bill = Bill(
                society_id=self.society_id,
                bill_no=format_document_number(settings.bill_prefix, year, month, sequence),
                sequence_no=sequence,
                flat_id=flat.id,
                month=month,
                year=year,
                total_amount=charges.total_amount,
                previous_due=previous_due,
                interest=Decimal("0.00"),
                penalty=Decimal("0.00"),
                grand_total=to_money(charges.total_amount + previous_due),
                paid_amount=Decimal("0.00"),
                status=BillStatus.PENDING.value,
                due_date=due_date,
                generated_at=now,
            )
            for position, line in enumerate(charges.line_items):
                bill.line_items.append(BillLineItem(
                    society_id=self.society_id,
                    charge_type_id=line.charge_type_id,
                    code=line.code,
                    description=line.description,
                    amount=line.amount,
                    position=position,
                ))

            self.db.add(bill)
            result["generated"].append(bill)
            sequence += 1

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Bill generation for {month:02d}/{year} failed: {e}")
            result["generated"] = []
            return False, "Bills for this period were generated concurrently, please retry", result

        count = len(result["generated"])
        logger.info(
            f"Generated {count} bill(s) for {month:02d}/{year} "
            f"(society={self.society_id}, skipped={len(result['skipped_flat_ids'])})"
        )
        return True, f"Successfully generated {count} bill(s)", result

    # ---------- deletion ----------

    def delete_bill(self, bill_id: int) -> Tuple[bool, str]:
        bill = self.get_bill(bill_id)
        if not bill:
            return False, "Bill not found"

        has_payments = self._q(Payment).filter(Payment.bill_id == bill_id).first() is not None
        if has_payments:
            logger.warning(f"Refused to delete bill {bill.bill_no}: payments recorded")
            return False, "Cannot delete bill with payments. Delete payments first."

        bill_no = bill.bill_no
        self.db.delete(bill)
        self.db.commit()
        logger.info(f"Bill {bill_no} deleted")
        return True, f"Bill {bill_no} deleted"
