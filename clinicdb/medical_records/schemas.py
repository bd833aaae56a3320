"""
Medical Record Schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MedicalRecordCreate(BaseModel):
    patient_id: int
    doctor_id: int
    diagnosis: str = Field(..., min_length=1)
    notes: Optional[str] = None


class MedicalRecordResponse(MedicalRecordCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
