"""
Doctor Model - Stores doctor-specific information.

This model extends the base User model (role=doctor) with professional details.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from ..database import Base


class Doctor(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key for doctor profile
    - user_id: Foreign key to User model (one profile per user)
    - specialization: Doctor's medical specialization
    - license_number: Medical license number, unique where tracked
    - created_at: When the doctor profile was created
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), unique=True, nullable=False)
    specialization = Column(String(120), nullable=True)
    license_number = Column(String(50), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="doctor_profile")
    appointments = relationship("Appointment", back_populates="doctor", passive_deletes="all")
    medical_records = relationship("MedicalRecord", back_populates="doctor", passive_deletes="all")
    prescriptions = relationship("Prescription", back_populates="doctor", passive_deletes="all")

    def __repr__(self):
        """String representation of the Doctor model"""
        return f"<Doctor(id={self.id}, user_id={self.user_id}, specialization='{self.specialization}')>"

    @property
    def name(self) -> str:
        """Get doctor's name from associated user"""
        return self.user.name if self.user else None

    @property
    def email(self) -> str:
        """Get doctor's email from associated user"""
        return self.user.email if self.user else None
