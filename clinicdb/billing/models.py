"""
Billing Models - Invoices charged to patients and the payments that settle them.

Amounts are Numeric(10, 2) and surface as Decimal; they never pass through float.
"""
import enum
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base, enum_values

MONEY = Numeric(10, 2)


class InvoiceStatus(str, enum.Enum):
    """Enum for invoice status"""
    UNPAID = "unpaid"
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, enum.Enum):
    """Enum for accepted payment methods"""
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    CARD = "card"
    INSURANCE = "insurance"


class Invoice(Base):
    """
    Invoice Model - A billable charge against a patient

    Fields:
    - id: Primary key
    - patient_id: Foreign key to Patient model
    - appointment_id: Originating appointment (optional)
    - description: What the charge is for
    - amount: Total amount due
    - status: unpaid, pending (partially paid) or paid
    - created_at: When the invoice was raised
    - updated_at: When the invoice was last updated
    """
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="amount_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="RESTRICT"), nullable=True)
    description = Column(Text, nullable=True)
    amount = Column(MONEY, nullable=False)
    status = Column(
        Enum(InvoiceStatus, name="invoice_status", values_callable=enum_values, create_constraint=True),
        nullable=False,
        default=InvoiceStatus.UNPAID,
        server_default=InvoiceStatus.UNPAID.value,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="invoices")
    appointment = relationship("Appointment", back_populates="invoices")
    payments = relationship(
        "Payment", back_populates="invoice", passive_deletes="all", order_by="Payment.id"
    )

    def __repr__(self):
        return f"<Invoice(id={self.id}, patient_id={self.patient_id}, amount={self.amount}, status='{self.status}')>"

    @property
    def amount_paid(self) -> Decimal:
        """Sum of the payments currently loaded for this invoice"""
        return sum((payment.amount_paid for payment in self.payments), Decimal("0.00"))


class Payment(Base):
    """
    Payment Model - A settlement against an invoice

    Fields:
    - id: Primary key
    - invoice_id: Foreign key to Invoice model
    - amount_paid: Amount settled by this payment
    - payment_date: When the money was received
    - method: cash, mobile_money, card or insurance
    - transaction_ref: External reference (receipt, mobile money code)
    - created_at: When the payment row was written
    """
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount_paid > 0", name="amount_paid_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount_paid = Column(MONEY, nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    method = Column(
        Enum(PaymentMethod, name="payment_method", values_callable=enum_values, create_constraint=True),
        nullable=False,
        default=PaymentMethod.CASH,
        server_default=PaymentMethod.CASH.value,
    )
    transaction_ref = Column(String(120), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    invoice = relationship("Invoice", back_populates="payments")

    def __repr__(self):
        return f"<Payment(id={self.id}, invoice_id={self.invoice_id}, amount_paid={self.amount_paid})>"
