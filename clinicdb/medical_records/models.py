"""
Medical Record Model - Stores diagnosis entries written by doctors.

Records are append-only: once flushed, an update or a delete raises
ImmutableRecordError.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, event, func
from sqlalchemy.orm import object_session, relationship

from ..database import Base
from ..exceptions import ImmutableRecordError


class MedicalRecord(Base):
    """
    Medical Record Model - Stores patient diagnoses

    Fields:
    - id: Primary key for medical record
    - patient_id: Foreign key to Patient model
    - doctor_id: Foreign key to Doctor model
    - diagnosis: Medical diagnosis
    - notes: Additional medical notes
    - created_at: When the record was created
    """
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="RESTRICT"), nullable=False)
    diagnosis = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="medical_records")
    doctor = relationship("Doctor", back_populates="medical_records")

    def __repr__(self):
        """String representation of the MedicalRecord model"""
        return f"<MedicalRecord(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id})>"


@event.listens_for(MedicalRecord, "before_update")
def _reject_record_update(mapper, connection, target):
    if not object_session(target).is_modified(target, include_collections=False):
        return
    raise ImmutableRecordError(f"Medical record {target.id} is append-only and cannot be modified")


@event.listens_for(MedicalRecord, "before_delete")
def _reject_record_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Medical record {target.id} is append-only and cannot be deleted")
