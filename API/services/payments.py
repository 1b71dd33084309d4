"""
Payment service - records receipts and applies them to bills.

Adding or deleting a payment updates the linked bill's paid_amount and
status in the same transaction as the payment row itself.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from core.config import settings as app_settings
from database.models import Bill, Flat, Payment, PaymentMode, Society
from schemas.settings import BillingSettings
from services.base import SocietyServiceBase, to_money
from services.billing import format_document_number, resolve_status


VALID_PAYMENT_MODES = {m.value for m in PaymentMode}


def apply_to_bill(bill: Bill, amount) -> None:
    """Add `amount` (negative to reverse) to the bill and re-derive status."""
    paid = to_money(bill.paid_amount) + to_money(amount)
    bill.paid_amount = max(Decimal("0.00"), paid)
    bill.status = resolve_status(bill.paid_amount, bill.grand_total)


class PaymentService(SocietyServiceBase):
    """Payment recording and receipting for one society."""

    # ---------- queries ----------

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        return self._q(Payment).filter(Payment.id == payment_id).first()

    def get_payments(
        self,
        flat_id: Optional[int] = None,
        bill_id: Optional[int] = None,
        payment_mode: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Payment]:
        q = self._q(Payment)
        if flat_id:
            q = q.filter(Payment.flat_id == flat_id)
        if bill_id:
            q = q.filter(Payment.bill_id == bill_id)
        if payment_mode:
            q = q.filter(Payment.payment_mode == payment_mode)
        if date_from:
            q = q.filter(Payment.payment_date >= date_from)
        if date_to:
            q = q.filter(Payment.payment_date <= date_to)
        return q.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

    def _next_sequence(self, payment_date: date) -> int:
        start = date(payment_date.year, payment_date.month, 1)
        if payment_date.month == 12:
            end = date(payment_date.year + 1, 1, 1)
        else:
            end = date(payment_date.year, payment_date.month + 1, 1)
        current = self._q(Payment).with_entities(func.max(Payment.sequence_no)).filter(
            Payment.payment_date >= start,
            Payment.payment_date < end,
        ).scalar()
        return (current or 0) + 1

    # ---------- add / delete ----------

    def add_payment(
        self,
        flat_id: int,
        amount,
        payment_date: date,
        settings: BillingSettings,
        payment_mode: str = 'cash',
        bill_id: Optional[int] = None,
        reference_no: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> Tuple[bool, str, Optional[Payment]]:
        amount = to_money(amount)
        if amount <= 0:
            return False, "Please enter a valid amount", None
        if payment_mode not in VALID_PAYMENT_MODES:
            return False, f"Invalid payment mode: {payment_mode}", None

        flat = self._q(Flat).filter(Flat.id == flat_id).first()
        if not flat:
            return False, "Flat not found", None

        bill = None
        if bill_id:
            bill = self._q(Bill).filter(Bill.id == bill_id).first()
            if not bill:
                return False, "Bill not found", None
            if bill.flat_id != flat.id:
                return False, "Bill does not belong to this flat", None

            remaining = to_money(bill.grand_total) - to_money(bill.paid_amount)
            if amount > remaining:
                if not settings.allow_overpayment:
                    return False, f"Amount exceeds the bill balance of {remaining}", None
                logger.warning(
                    f"Over-payment on bill {bill.bill_no}: {amount} against balance {remaining}"
                )

        sequence = self._next_sequence(payment_date)
        payment = Payment(
            society_id=self.society_id,
            receipt_no=format_document_number(
                settings.receipt_prefix, payment_date.year, payment_date.month, sequence
            ),
            sequence_no=sequence,
            flat_id=flat.id,
            bill_id=bill.id if bill else None,
            amount=amount,
            payment_mode=payment_mode,
            payment_date=payment_date,
            reference_no=reference_no,
            remarks=remarks,
        )
        self.db.add(payment)

        if bill:
            apply_to_bill(bill, amount)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Saving payment for flat {flat.flat_no} failed: {e}")
            return False, "Error saving payment, please retry", None

        self.db.refresh(payment)
        logger.info(
            f"Payment {payment.receipt_no} recorded: {amount} from flat {flat.flat_no}"
            + (f" against {bill.bill_no} ({bill.status})" if bill else " (unallocated)")
        )
        return True, "Payment recorded successfully", payment

    def delete_payment(self, payment_id: int) -> Tuple[bool, str]:
        payment = self.get_payment(payment_id)
        if not payment:
            return False, "Payment not found"

        if payment.bill_id:
            bill = self._q(Bill).filter(Bill.id == payment.bill_id).first()
            if bill:
                apply_to_bill(bill, -to_money(payment.amount))

        receipt_no = payment.receipt_no
        self.db.delete(payment)
        self.db.commit()
        logger.info(f"Payment {receipt_no} deleted")
        return True, "Payment deleted successfully"

    # ---------- receipt ----------

    def get_receipt(self, payment_id: int, society: Society) -> Optional[dict]:
        """Everything needed to print a receipt."""
        payment = self.get_payment(payment_id)
        if not payment:
            return None

        flat = payment.flat
        bill = payment.bill
        return {
            "society": {
                "name": society.name,
                "address": society.address,
                "registration_no": society.registration_no,
                "phone": society.phone,
            },
            "receipt_no": payment.receipt_no,
            "payment_date": str(payment.payment_date),
            "amount": float(payment.amount),
            "currency": app_settings.currency,
            "payment_mode": payment.payment_mode,
            "reference_no": payment.reference_no,
            "remarks": payment.remarks,
            "flat": {
                "id": flat.id,
                "flat_no": flat.flat_no,
                "building": flat.building.name if flat.building else None,
                "owner_name": flat.owner_name,
            },
            "bill": {
                "id": bill.id,
                "bill_no": bill.bill_no,
                "month": bill.month,
                "year": bill.year,
                "grand_total": float(bill.grand_total),
                "paid_amount": float(bill.paid_amount),
                "balance": float(bill.balance),
                "status": bill.status,
            } if bill else None,
        }
