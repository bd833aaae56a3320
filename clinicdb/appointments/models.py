"""
Appointment Model - Stores scheduled clinical encounters.

This model manages the relationship between doctors and patients for appointments.
"""
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text, func
from sqlalchemy.orm import relationship

from ..database import Base, enum_values


class AppointmentStatus(str, enum.Enum):
    """Enum for appointment status"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Appointment(Base):
    """
    Appointment Model - Stores appointment information

    Fields:
    - id: Primary key for appointment
    - patient_id: Foreign key to Patient model
    - doctor_id: Foreign key to Doctor model
    - scheduled_at: Date and time of the appointment
    - reason: Reason for the appointment
    - status: Current status of the appointment
    - created_at: When the appointment was created
    - updated_at: When the appointment was last updated
    """
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="RESTRICT"), nullable=False, index=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(
        Enum(AppointmentStatus, name="appointment_status", values_callable=enum_values, create_constraint=True),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        server_default=AppointmentStatus.SCHEDULED.value,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")
    invoices = relationship("Invoice", back_populates="appointment", passive_deletes="all")

    def __repr__(self):
        """String representation of the Appointment model"""
        return f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, patient_id={self.patient_id}, date='{self.scheduled_at}')>"
