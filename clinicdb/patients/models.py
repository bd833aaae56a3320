"""
Patient Model - Stores care recipients.

Patients are standalone records with no login account. They are never
hard-deleted once clinical or financial rows reference them; deactivate instead.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text, func, true
from sqlalchemy.orm import relationship, validates

from ..database import Base


class Patient(Base):
    """
    Patient Model - Stores patient demographics and contact details

    Fields:
    - id: Primary key for patient
    - name: Patient's full name
    - email: Contact email (optional, stored lowercase)
    - phone: Contact number (optional)
    - address: Patient's address (optional)
    - date_of_birth: Patient's date of birth
    - gender: Patient's gender
    - insurance: Insurance provider or policy reference
    - emergency_contact: Emergency contact information
    - is_active: False once the patient has been deactivated
    - created_at: When the patient was registered
    - updated_at: When the patient was last updated
    """
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(120), nullable=True, index=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    insurance = Column(String(120), nullable=True)
    emergency_contact = Column(String(120), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="patient", passive_deletes="all")
    medical_records = relationship("MedicalRecord", back_populates="patient", passive_deletes="all")
    prescriptions = relationship("Prescription", back_populates="patient", passive_deletes="all")
    invoices = relationship("Invoice", back_populates="patient", passive_deletes="all")
    notifications = relationship(
        "Notification", back_populates="patient", cascade="all, delete-orphan", passive_deletes=True
    )

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, name='{self.name}')>"
