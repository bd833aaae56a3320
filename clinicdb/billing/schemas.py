"""
Billing Schemas - Pydantic models for invoices and payments.

Amounts are Decimal with at most 10 digits and 2 decimal places, matching
the Numeric(10, 2) columns.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from .models import InvoiceStatus, PaymentMethod


class InvoiceCreate(BaseModel):
    """
    Invoice Creation Schema

    Fields:
    - patient_id: Patient being billed
    - amount: Total amount due
    - description: What the charge is for (optional)
    - appointment_id: Originating appointment (optional)
    """
    patient_id: int
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    appointment_id: Optional[int] = None


class PaymentCreate(BaseModel):
    """
    Payment Creation Schema

    Fields:
    - amount_paid: Amount settled, strictly positive
    - method: Payment method
    - transaction_ref: External reference (optional)
    - payment_date: When the money was received; defaults to now in the database
    """
    amount_paid: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    method: PaymentMethod = PaymentMethod.CASH
    transaction_ref: Optional[str] = Field(None, max_length=120)
    payment_date: Optional[datetime] = None


class PaymentResponse(BaseModel):
    id: int
    invoice_id: int
    amount_paid: Decimal
    method: PaymentMethod
    transaction_ref: Optional[str] = None
    payment_date: datetime

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    """Invoice Response Schema with its payments"""
    id: int
    patient_id: int
    appointment_id: Optional[int] = None
    description: Optional[str] = None
    amount: Decimal
    status: InvoiceStatus
    payments: List[PaymentResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True
