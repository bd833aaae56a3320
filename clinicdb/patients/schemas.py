"""
Patient Schemas - Pydantic models for patient data validation and serialization.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class PatientBase(BaseModel):
    """Fields shared by patient creation and responses"""
    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=10)
    insurance: Optional[str] = Field(None, max_length=120)
    emergency_contact: Optional[str] = Field(None, max_length=120)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, value: Optional[date]) -> Optional[date]:
        if value and value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value


class PatientCreate(PatientBase):
    """Patient Creation Schema - Used at intake"""
    pass


class PatientUpdate(BaseModel):
    """
    Patient Update Schema - Only the fields that were set are applied
    """
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=10)
    insurance: Optional[str] = Field(None, max_length=120)
    emergency_contact: Optional[str] = Field(None, max_length=120)


class PatientResponse(PatientBase):
    """Patient Response Schema"""
    id: int
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
