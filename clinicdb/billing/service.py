"""
Billing Service - Invoices, payments and invoice status.

Rules enforced here rather than in the schema:
- the sum of payments against an invoice never exceeds its amount
- a payment moves the invoice to paid when fully settled, otherwise pending
- invoice status only moves forward: unpaid -> pending -> paid, or unpaid -> paid
- status always agrees with the payments; a zero amount invoice is paid from the start
"""
import logging
from decimal import Decimal
from typing import Dict, FrozenSet, Optional

from sqlalchemy.orm import Session

from ..appointments.service import get_appointment
from ..database import transaction
from ..exceptions import (
    AppointmentPatientMismatch,
    InvalidStatusTransition,
    InvoiceStatusMismatch,
    OverpaymentError,
    ResourceNotFoundException,
)
from ..patients.service import get_active_patient
from .models import Invoice, InvoiceStatus, Payment
from .schemas import InvoiceCreate, PaymentCreate

# Set up logging
logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

ALLOWED_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.UNPAID: frozenset({InvoiceStatus.PENDING, InvoiceStatus.PAID}),
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.PAID: frozenset(),
}


def get_invoice(db: Session, invoice_id: int, for_update: bool = False) -> Invoice:
    """
    Get an invoice by ID.

    Args:
        db: Database session
        invoice_id: ID of the invoice
        for_update: Lock the row until the transaction ends

    Raises:
        ResourceNotFoundException: If invoice not found
    """
    query = db.query(Invoice).filter(Invoice.id == invoice_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    invoice = query.first()
    if not invoice:
        raise ResourceNotFoundException(f"Invoice {invoice_id} not found")
    return invoice


def _total_paid(db: Session, invoice_id: int) -> Decimal:
    # Summed in Python so amounts stay Decimal on every backend
    amounts = db.query(Payment.amount_paid).filter(Payment.invoice_id == invoice_id).all()
    return sum((amount for (amount,) in amounts), ZERO)


def get_invoice_balance(db: Session, invoice_id: int) -> Decimal:
    """
    Amount still owed on an invoice.

    Returns:
        Decimal: invoice amount minus the sum of its payments
    """
    invoice = get_invoice(db, invoice_id)
    return invoice.amount - _total_paid(db, invoice_id)


def settled_status(amount: Decimal, total_paid: Decimal) -> InvoiceStatus:
    """Status an invoice of this amount should have after total_paid has been received."""
    if total_paid >= amount:
        return InvoiceStatus.PAID
    if total_paid > ZERO:
        return InvoiceStatus.PENDING
    return InvoiceStatus.UNPAID


def _set_status(invoice: Invoice, status: InvoiceStatus) -> None:
    if status == invoice.status:
        return
    if status not in ALLOWED_TRANSITIONS[invoice.status]:
        raise InvalidStatusTransition("Invoice", invoice.status, status)
    invoice.status = status


def _apply_payment(db: Session, invoice: Invoice, payment_data: PaymentCreate,
                   already_paid: Decimal) -> Payment:
    if invoice.status == InvoiceStatus.PAID:
        raise OverpaymentError(f"Invoice {invoice.id} is already paid")

    new_total = already_paid + payment_data.amount_paid
    if new_total > invoice.amount:
        raise OverpaymentError(
            f"Payment of {payment_data.amount_paid} exceeds the outstanding balance "
            f"{invoice.amount - already_paid} on invoice {invoice.id}"
        )

    payment = Payment(
        invoice=invoice,
        amount_paid=payment_data.amount_paid,
        method=payment_data.method,
        transaction_ref=payment_data.transaction_ref,
    )
    if payment_data.payment_date is not None:
        payment.payment_date = payment_data.payment_date
    db.add(payment)

    _set_status(invoice, settled_status(invoice.amount, new_total))
    return payment


def create_invoice(db: Session, invoice_data: InvoiceCreate,
                   initial_payment: Optional[PaymentCreate] = None) -> Invoice:
    """
    Raise an invoice, optionally settling part or all of it immediately.

    The invoice and its first payment are written in the same transaction.

    Args:
        db: Database session
        invoice_data: Patient, amount and description
        initial_payment: Payment taken at the desk (optional)

    Returns:
        Invoice: The created invoice

    Raises:
        ResourceNotFoundException: If the patient or appointment does not exist
        InactivePatientError: If the patient has been deactivated
        AppointmentPatientMismatch: If the appointment belongs to another patient
        OverpaymentError: If the initial payment exceeds the amount
    """
    with transaction(db):
        get_active_patient(db, invoice_data.patient_id)
        if invoice_data.appointment_id is not None:
            appointment = get_appointment(db, invoice_data.appointment_id)
            if appointment.patient_id != invoice_data.patient_id:
                raise AppointmentPatientMismatch(
                    f"Appointment {appointment.id} belongs to a different patient"
                )

        invoice = Invoice(
            patient_id=invoice_data.patient_id,
            appointment_id=invoice_data.appointment_id,
            description=invoice_data.description,
            amount=invoice_data.amount,
            status=settled_status(invoice_data.amount, ZERO),
        )
        db.add(invoice)

        if initial_payment is not None:
            _apply_payment(db, invoice, initial_payment, already_paid=ZERO)

    db.refresh(invoice)
    logger.info(f"Invoice {invoice.id} raised for patient {invoice.patient_id}: {invoice.amount}")
    return invoice


def record_payment(db: Session, invoice_id: int, payment_data: PaymentCreate) -> Payment:
    """
    Record a payment against an invoice.

    The invoice row is locked while prior payments are summed, so two
    concurrent payments cannot both pass the balance check.

    Args:
        db: Database session
        invoice_id: ID of the invoice being settled
        payment_data: Amount, method and reference

    Returns:
        Payment: The recorded payment

    Raises:
        ResourceNotFoundException: If invoice not found
        OverpaymentError: If the payment would exceed the invoice amount
    """
    with transaction(db):
        invoice = get_invoice(db, invoice_id, for_update=True)
        already_paid = _total_paid(db, invoice_id)
        payment = _apply_payment(db, invoice, payment_data, already_paid)

    db.refresh(payment)
    logger.info(
        f"Payment {payment.id} of {payment.amount_paid} recorded on invoice {invoice_id}, "
        f"invoice now {invoice.status.value}"
    )
    return payment


def update_invoice_status(db: Session, invoice_id: int, status: InvoiceStatus) -> Invoice:
    """
    Move an invoice to a new status by hand.

    Only the status its payments imply is accepted, so a manual change can
    bring a stale row back in line but never mark unsettled money as paid.

    Raises:
        InvalidStatusTransition: If the move goes backwards
        InvoiceStatusMismatch: If the payments imply a different status
    """
    status = InvoiceStatus(status)
    with transaction(db):
        invoice = get_invoice(db, invoice_id, for_update=True)
        expected = settled_status(invoice.amount, _total_paid(db, invoice_id))
        if status != expected:
            raise InvoiceStatusMismatch(
                f"Invoice {invoice_id} cannot be marked {status.value}: its payments make it {expected.value}"
            )
        _set_status(invoice, status)

    db.refresh(invoice)
    logger.info(f"Invoice {invoice_id} is now {status.value}")
    return invoice
