"""
User Schemas - Pydantic models for account data validation and serialization.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..core.security import MIN_PASSWORD_LENGTH, validate_password_strength
from .models import UserRole


class UserBase(BaseModel):
    """
    Base User Schema - Contains fields common to all user-related schemas

    Fields:
    - email: User's email address
    - name: User's display name
    """
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=120)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class UserCreate(UserBase):
    """
    User Creation Schema - Used when creating a new account

    Extends UserBase with:
    - password: Plain text password (hashed before storage)
    - role: Account role
    - phone: Contact number (optional)
    - address: Address (optional)
    """
    password: str
    role: UserRole = UserRole.STAFF
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        if not validate_password_strength(value):
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters and contain "
                "upper and lower case letters and a digit"
            )
        return value


class UserResponse(UserBase):
    """
    User Response Schema - Used when returning account data (never the hash)
    """
    id: int
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
