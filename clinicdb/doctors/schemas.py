"""
Doctor Schemas - Pydantic models for doctor profile data validation and serialization.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..users.models import UserRole
from ..users.schemas import UserCreate, UserResponse


class DoctorCreate(UserCreate):
    """
    Doctor Creation Schema - Creates the account and the doctor profile together

    Includes additional professional information:
    - specialization: Doctor's medical specialization
    - license_number: Medical license number (unique)
    """
    role: UserRole = UserRole.DOCTOR
    specialization: Optional[str] = Field(None, max_length=120)
    license_number: Optional[str] = Field(None, max_length=50)


class DoctorResponse(BaseModel):
    """
    Doctor Response Schema - Used when returning doctor data
    """
    id: int
    user: UserResponse
    specialization: Optional[str] = None
    license_number: Optional[str] = None
    created_at: datetime

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
