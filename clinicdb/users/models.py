"""
User Model - Stores system accounts (administrators, doctors, staff).

Patients are not login identities and live in their own table.
"""
import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, Text, func, true
from sqlalchemy.orm import relationship, validates

from ..core.security import is_password_hash
from ..database import Base, enum_values


class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the clinic system.

    Roles:
    - ADMIN: System administrators with full access
    - DOCTOR: Medical practitioners; paired with a Doctor profile
    - STAFF: Administrative staff who manage appointments and billing
    """
    ADMIN = "admin"
    DOCTOR = "doctor"
    STAFF = "staff"


class User(Base):
    """
    User Model - Stores all account information in the system

    Fields:
    - id: Primary key for user identification
    - name: User's display name
    - email: Unique email address, always stored lowercase
    - password_hash: bcrypt hash (never store raw passwords)
    - role: User role (admin, doctor, staff)
    - phone: Contact number (optional)
    - address: Physical address (optional)
    - is_active: Whether the account is enabled
    - created_at: Timestamp when user was created
    - updated_at: Timestamp when user was last updated
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(120), unique=True, index=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=enum_values, create_constraint=True),
        nullable=False,
        default=UserRole.STAFF,
        server_default=UserRole.STAFF.value,
    )
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    doctor_profile = relationship("Doctor", back_populates="user", uselist=False, passive_deletes="all")
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @validates("email")
    def normalize_email(self, key, value):
        """Emails compare case-insensitively, so store them lowercase."""
        return value.strip().lower() if value is not None else value

    @validates("password_hash")
    def check_password_hash(self, key, value):
        """Refuse anything that is not a recognised password hash."""
        if value is not None and not is_password_hash(value):
            raise ValueError("password_hash must be a bcrypt hash, not a raw password")
        return value

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
