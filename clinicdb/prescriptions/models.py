"""
Prescription Model - Medication orders issued by a doctor for a patient.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base


class Prescription(Base):
    """
    Prescription Model

    Fields:
    - id: Primary key
    - patient_id: Foreign key to Patient model
    - doctor_id: Foreign key to Doctor model
    - medication: Medication name
    - dosage: Dose and frequency (optional)
    - instructions: Free-text instructions (optional)
    - created_at: When the prescription was written
    """
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="RESTRICT"), nullable=False)
    medication = Column(String(200), nullable=False)
    dosage = Column(String(120), nullable=True)
    instructions = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    patient = relationship("Patient", back_populates="prescriptions")
    doctor = relationship("Doctor", back_populates="prescriptions")

    def __repr__(self):
        return f"<Prescription(id={self.id}, patient_id={self.patient_id}, medication='{self.medication}')>"
