"""
Tests for invoices and payments at the service boundary.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from clinicdb.appointments.schemas import AppointmentCreate
from clinicdb.appointments.service import create_appointment
from clinicdb.billing.models import Invoice, InvoiceStatus, Payment, PaymentMethod
from clinicdb.billing.schemas import InvoiceCreate, InvoiceResponse, PaymentCreate
from clinicdb.billing.service import (
    create_invoice,
    get_invoice,
    get_invoice_balance,
    record_payment,
    update_invoice_status,
)
from clinicdb.database import transaction
from clinicdb.doctors.schemas import DoctorCreate
from clinicdb.doctors.service import create_doctor
from clinicdb.exceptions import (
    AppointmentPatientMismatch,
    InvalidStatusTransition,
    InvoiceStatusMismatch,
    OverpaymentError,
    ResourceNotFoundException,
)
from clinicdb.patients.schemas import PatientCreate
from clinicdb.patients.service import create_patient, get_patient_with_appointments


def invoice_for(db, patient, amount="150.00", **kwargs):
    return create_invoice(db, InvoiceCreate(patient_id=patient.id, amount=Decimal(amount), **kwargs))


def test_clinic_visit_end_to_end(db):
    """
    Doctor, patient, appointment, invoice, full payment: the invoice ends up paid.
    """
    doctor = create_doctor(
        db,
        DoctorCreate(email="dr.jane@clinic.example.com", name="Jane", password="Secure123", license_number="L-1"),
    )
    patient = create_patient(db, PatientCreate(name="John Doe", date_of_birth="1990-01-01"))
    appointment = create_appointment(
        db,
        AppointmentCreate(patient_id=patient.id, doctor_id=doctor.id, scheduled_at=datetime(2025, 3, 1, 10, 0)),
    )
    invoice = create_invoice(
        db,
        InvoiceCreate(patient_id=patient.id, appointment_id=appointment.id, amount=Decimal("150.00")),
    )
    assert invoice.status == InvoiceStatus.UNPAID

    payment = record_payment(db, invoice.id, PaymentCreate(amount_paid=Decimal("150.00")))

    assert payment.amount_paid == Decimal("150.00")
    assert payment.method == PaymentMethod.CASH
    assert get_invoice(db, invoice.id).status == InvoiceStatus.PAID
    assert get_invoice_balance(db, invoice.id) == Decimal("0.00")
    assert [a.id for a in get_patient_with_appointments(db, patient.id).appointments] == [appointment.id]
    assert [i.id for i in appointment.invoices] == [invoice.id]


def test_partial_payments_move_through_pending(db, patient):
    invoice = invoice_for(db, patient, "100.00")

    record_payment(db, invoice.id, PaymentCreate(amount_paid="40.00", method=PaymentMethod.MOBILE_MONEY,
                                                 transaction_ref="QK1"))
    assert get_invoice(db, invoice.id).status == InvoiceStatus.PENDING
    assert get_invoice_balance(db, invoice.id) == Decimal("60.00")

    record_payment(db, invoice.id, PaymentCreate(amount_paid="60.00", method=PaymentMethod.CARD))
    assert get_invoice(db, invoice.id).status == InvoiceStatus.PAID

    response = InvoiceResponse.model_validate(get_invoice(db, invoice.id))
    assert [p.amount_paid for p in response.payments] == [Decimal("40.00"), Decimal("60.00")]


def test_overpayment_is_rejected_and_nothing_is_written(db, patient):
    """
    Payments summed against an invoice never exceed its amount.
    """
    invoice = invoice_for(db, patient, "100.00")
    record_payment(db, invoice.id, PaymentCreate(amount_paid="70.00"))

    with pytest.raises(OverpaymentError):
        record_payment(db, invoice.id, PaymentCreate(amount_paid="30.01"))

    assert db.query(Payment).count() == 1
    assert get_invoice(db, invoice.id).status == InvoiceStatus.PENDING
    assert get_invoice_balance(db, invoice.id) == Decimal("30.00")


def test_paid_invoice_takes_no_more_payments(db, patient):
    invoice = invoice_for(db, patient, "10.00")
    record_payment(db, invoice.id, PaymentCreate(amount_paid="10.00"))

    with pytest.raises(OverpaymentError):
        record_payment(db, invoice.id, PaymentCreate(amount_paid="0.01"))


def test_invoice_with_initial_payment_is_atomic(db, patient):
    invoice = create_invoice(
        db,
        InvoiceCreate(patient_id=patient.id, amount=Decimal("80.00"), description="Lab tests"),
        initial_payment=PaymentCreate(amount_paid="80.00", method=PaymentMethod.INSURANCE),
    )
    assert invoice.status == InvoiceStatus.PAID
    assert len(invoice.payments) == 1

    with pytest.raises(OverpaymentError):
        create_invoice(
            db,
            InvoiceCreate(patient_id=patient.id, amount=Decimal("20.00")),
            initial_payment=PaymentCreate(amount_paid="25.00"),
        )

    # The rejected payment took its invoice with it
    assert db.query(Invoice).count() == 1
    assert db.query(Payment).count() == 1


def test_decimal_amounts_do_not_drift(db, patient):
    invoice = invoice_for(db, patient, "0.30")
    for _ in range(3):
        record_payment(db, invoice.id, PaymentCreate(amount_paid="0.10"))

    assert get_invoice(db, invoice.id).status == InvoiceStatus.PAID
    assert get_invoice_balance(db, invoice.id) == Decimal("0.00")


def test_manual_status_must_match_payments(db, patient):
    """
    An invoice with money still owed cannot be marked paid or pending by hand.
    """
    invoice = invoice_for(db, patient)

    with pytest.raises(InvoiceStatusMismatch):
        update_invoice_status(db, invoice.id, InvoiceStatus.PAID)
    with pytest.raises(InvoiceStatusMismatch):
        update_invoice_status(db, invoice.id, InvoiceStatus.PENDING)
    assert get_invoice(db, invoice.id).status == InvoiceStatus.UNPAID

    # The real payment is still accepted afterwards
    record_payment(db, invoice.id, PaymentCreate(amount_paid="150.00"))
    assert get_invoice(db, invoice.id).status == InvoiceStatus.PAID


def test_manual_status_brings_stale_invoice_in_line(db, patient):
    invoice = invoice_for(db, patient, "50.00")
    with transaction(db):
        db.add(Payment(invoice_id=invoice.id, amount_paid=Decimal("20.00")))

    assert update_invoice_status(db, invoice.id, "pending").status == InvoiceStatus.PENDING

    with transaction(db):
        db.add(Payment(invoice_id=invoice.id, amount_paid=Decimal("30.00")))

    assert update_invoice_status(db, invoice.id, InvoiceStatus.PAID).status == InvoiceStatus.PAID


def test_manual_status_never_goes_backwards(db, patient):
    invoice = invoice_for(db, patient, "50.00")
    with transaction(db):
        invoice.status = InvoiceStatus.PAID
        db.add(Payment(invoice_id=invoice.id, amount_paid=Decimal("20.00")))

    with pytest.raises(InvalidStatusTransition):
        update_invoice_status(db, invoice.id, InvoiceStatus.PENDING)


def test_zero_amount_invoice_is_paid(db, patient):
    invoice = invoice_for(db, patient, "0.00")

    assert invoice.status == InvoiceStatus.PAID
    assert get_invoice_balance(db, invoice.id) == Decimal("0.00")


def test_invoice_appointment_must_belong_to_patient(db, patient, doctor):
    other = create_patient(db, PatientCreate(name="Someone Else"))
    appointment = create_appointment(
        db, AppointmentCreate(patient_id=other.id, doctor_id=doctor.id, scheduled_at=datetime(2025, 3, 1, 10))
    )

    with pytest.raises(AppointmentPatientMismatch):
        invoice_for(db, patient, appointment_id=appointment.id)
    assert db.query(Invoice).count() == 0


def test_payment_schema_rejects_bad_amounts():
    for amount in ("0", "-5.00", "1.001", "123456789.00"):
        with pytest.raises(ValueError):
            PaymentCreate(amount_paid=amount)


def test_missing_invoice(db):
    with pytest.raises(ResourceNotFoundException):
        record_payment(db, 55, PaymentCreate(amount_paid="1.00"))
    with pytest.raises(ResourceNotFoundException):
        get_invoice_balance(db, 55)
