"""
Import all models here so the mapper registry and Base.metadata are complete.
"""
from .database import Base
from .users.models import User, UserRole
from .doctors.models import Doctor
from .patients.models import Patient
from .appointments.models import Appointment, AppointmentStatus
from .medical_records.models import MedicalRecord
from .prescriptions.models import Prescription
from .billing.models import Invoice, InvoiceStatus, Payment, PaymentMethod
from .inventory.models import InventoryItem
from .notifications.models import Notification

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Doctor",
    "Patient",
    "Appointment",
    "AppointmentStatus",
    "MedicalRecord",
    "Prescription",
    "Invoice",
    "InvoiceStatus",
    "Payment",
    "PaymentMethod",
    "InventoryItem",
    "Notification",
]
