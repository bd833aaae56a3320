"""
Medical Record Service - Append-only diagnosis entries.

There is deliberately no update or delete function; corrections are new records.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..database import transaction
from ..doctors.service import get_doctor
from ..patients.service import get_patient
from .models import MedicalRecord
from .schemas import MedicalRecordCreate

logger = logging.getLogger(__name__)


def create_medical_record(db: Session, record_data: MedicalRecordCreate) -> MedicalRecord:
    """
    Append a diagnosis to a patient's history.

    Raises:
        ResourceNotFoundException: If the patient or doctor does not exist
    """
    with transaction(db):
        get_patient(db, record_data.patient_id)
        get_doctor(db, record_data.doctor_id)
        record = MedicalRecord(**record_data.model_dump())
        db.add(record)

    db.refresh(record)
    logger.info(f"Medical record {record.id} added for patient {record.patient_id}")
    return record


def list_patient_records(db: Session, patient_id: int) -> List[MedicalRecord]:
    """A patient's records, oldest first."""
    return (
        db.query(MedicalRecord)
        .filter(MedicalRecord.patient_id == patient_id)
        .order_by(MedicalRecord.created_at, MedicalRecord.id)
        .all()
    )
