from datetime import date
from decimal import Decimal

import pytest

from database.models import Payment
from schemas.settings import BillingSettings
from services.billing import BillingService
from services.payments import PaymentService


@pytest.fixture
def bill(session, society, make_flat, billing_settings):
    make_flat("A-101", area="650")
    _, _, result = BillingService(session, society.id).generate_bills(3, 2024, billing_settings)
    return result["generated"][0]


def test_full_payment_marks_paid(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    ok, msg, payment = service.add_payment(
        bill.flat_id, Decimal("2150"), date(2024, 3, 10), billing_settings, bill_id=bill.id
    )

    assert ok, msg
    assert payment.receipt_no == "RCP-2024-03-0001"
    assert bill.paid_amount == Decimal("2150.00")
    assert bill.status == "paid"


def test_delete_payment_reverts_bill(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    _, _, payment = service.add_payment(
        bill.flat_id, 2150, date(2024, 3, 10), billing_settings, bill_id=bill.id
    )

    ok, msg = service.delete_payment(payment.id)

    assert ok
    session.refresh(bill)
    assert bill.paid_amount == Decimal("0.00")
    assert bill.status == "pending"
    assert session.query(Payment).count() == 0


def test_partial_then_paid(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    service.add_payment(bill.flat_id, 1000, date(2024, 3, 5), billing_settings, bill_id=bill.id)
    assert bill.status == "partial"

    service.add_payment(bill.flat_id, 1150, date(2024, 3, 6), billing_settings, bill_id=bill.id)
    assert bill.status == "paid"
    assert bill.paid_amount == bill.grand_total


def test_delete_one_of_two_payments(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    service.add_payment(bill.flat_id, 1000, date(2024, 3, 5), billing_settings, bill_id=bill.id)
    _, _, second = service.add_payment(
        bill.flat_id, 1150, date(2024, 3, 6), billing_settings, bill_id=bill.id
    )

    service.delete_payment(second.id)
    assert bill.paid_amount == Decimal("1000.00")
    assert bill.status == "partial"


def test_paid_amount_matches_linked_payments(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    for amount, day in ((300, 1), (200, 2), (450, 3)):
        service.add_payment(bill.flat_id, amount, date(2024, 3, day), billing_settings, bill_id=bill.id)

    linked = session.query(Payment).filter(Payment.bill_id == bill.id).all()
    assert bill.paid_amount == sum(p.amount for p in linked)


def test_overpayment_allowed_by_default(session, society, bill, billing_settings):
    ok, _, _ = PaymentService(session, society.id).add_payment(
        bill.flat_id, 3000, date(2024, 3, 10), billing_settings, bill_id=bill.id
    )
    assert ok
    assert bill.status == "paid"
    assert bill.balance == Decimal("-850.00")


def test_overpayment_refused_when_disabled(session, society, bill):
    settings = BillingSettings(allow_overpayment=False)
    ok, msg, payment = PaymentService(session, society.id).add_payment(
        bill.flat_id, 3000, date(2024, 3, 10), settings, bill_id=bill.id
    )
    assert not ok
    assert payment is None
    assert msg == "Amount exceeds the bill balance of 2150.00"
    assert session.query(Payment).count() == 0


def test_unallocated_payment(session, society, bill, billing_settings):
    ok, _, payment = PaymentService(session, society.id).add_payment(
        bill.flat_id, 500, date(2024, 3, 10), billing_settings
    )
    assert ok
    assert payment.bill_id is None
    assert bill.paid_amount == Decimal("0.00")


def test_receipt_numbers_follow_payment_month(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    _, _, first = service.add_payment(bill.flat_id, 100, date(2024, 3, 10), billing_settings)
    _, _, second = service.add_payment(bill.flat_id, 100, date(2024, 3, 11), billing_settings)
    _, _, april = service.add_payment(bill.flat_id, 100, date(2024, 4, 1), billing_settings)

    assert first.receipt_no == "RCP-2024-03-0001"
    assert second.receipt_no == "RCP-2024-03-0002"
    assert april.receipt_no == "RCP-2024-04-0001"


@pytest.mark.parametrize("amount", [0, -10])
def test_invalid_amount(session, society, bill, billing_settings, amount):
    ok, msg, _ = PaymentService(session, society.id).add_payment(
        bill.flat_id, amount, date(2024, 3, 10), billing_settings
    )
    assert not ok
    assert msg == "Please enter a valid amount"


def test_invalid_mode(session, society, bill, billing_settings):
    ok, msg, _ = PaymentService(session, society.id).add_payment(
        bill.flat_id, 100, date(2024, 3, 10), billing_settings, payment_mode="crypto"
    )
    assert not ok
    assert msg == "Invalid payment mode: crypto"


def test_bill_of_another_flat(session, society, bill, make_flat, billing_settings):
    other = make_flat("A-102")
    ok, msg, _ = PaymentService(session, society.id).add_payment(
        other.id, 100, date(2024, 3, 10), billing_settings, bill_id=bill.id
    )
    assert not ok
    assert msg == "Bill does not belong to this flat"


def test_missing_flat_and_bill(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    assert service.add_payment(999, 100, date(2024, 3, 10), billing_settings)[1] == "Flat not found"
    assert service.add_payment(
        bill.flat_id, 100, date(2024, 3, 10), billing_settings, bill_id=999
    )[1] == "Bill not found"
    assert service.delete_payment(999) == (False, "Payment not found")


def test_receipt(session, society, bill, billing_settings):
    service = PaymentService(session, society.id)
    _, _, payment = service.add_payment(
        bill.flat_id, 1000, date(2024, 3, 10), billing_settings,
        payment_mode="upi", bill_id=bill.id, reference_no="UTR123",
    )

    receipt = service.get_receipt(payment.id, society)

    assert receipt["society"]["name"] == "Green Park CHS"
    assert receipt["receipt_no"] == "RCP-2024-03-0001"
    assert receipt["amount"] == 1000.0
    assert receipt["payment_mode"] == "upi"
    assert receipt["currency"] == "INR"
    assert receipt["flat"]["flat_no"] == "A-101"
    assert receipt["flat"]["building"] == "A Wing"
    assert receipt["bill"]["bill_no"] == "BILL-2024-03-0001"
    assert receipt["bill"]["balance"] == 1150.0
    assert receipt["bill"]["status"] == "partial"
