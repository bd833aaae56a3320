"""
Appointment Schemas - Pydantic models for appointment data.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .models import AppointmentStatus


class AppointmentCreate(BaseModel):
    """
    Appointment Creation Schema

    Fields:
    - patient_id: Patient being seen
    - doctor_id: Doctor profile seeing the patient
    - scheduled_at: Date and time of the appointment
    - reason: Reason for the visit (optional)
    """
    patient_id: int
    doctor_id: int
    scheduled_at: datetime
    reason: Optional[str] = None


class AppointmentResponse(BaseModel):
    """Appointment Response Schema"""
    id: int
    patient_id: int
    doctor_id: int
    scheduled_at: datetime
    reason: Optional[str] = None
    status: AppointmentStatus
    created_at: datetime

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
