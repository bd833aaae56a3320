"""
Prescription Schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PrescriptionCreate(BaseModel):
    patient_id: int
    doctor_id: int
    medication: str = Field(..., min_length=1, max_length=200)
    dosage: Optional[str] = Field(None, max_length=120)
    instructions: Optional[str] = None


class PrescriptionResponse(PrescriptionCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
