"""
Prescription Service.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..database import transaction
from ..doctors.service import get_doctor
from ..patients.service import get_active_patient
from .models import Prescription
from .schemas import PrescriptionCreate

logger = logging.getLogger(__name__)


def create_prescription(db: Session, prescription_data: PrescriptionCreate) -> Prescription:
    """
    Write a prescription for an active patient.

    Raises:
        ResourceNotFoundException: If the patient or doctor does not exist
        InactivePatientError: If the patient has been deactivated
    """
    with transaction(db):
        get_active_patient(db, prescription_data.patient_id)
        get_doctor(db, prescription_data.doctor_id)
        prescription = Prescription(**prescription_data.model_dump())
        db.add(prescription)

    db.refresh(prescription)
    logger.info(f"Prescription {prescription.id} written for patient {prescription.patient_id}")
    return prescription


def list_patient_prescriptions(db: Session, patient_id: int) -> List[Prescription]:
    return (
        db.query(Prescription)
        .filter(Prescription.patient_id == patient_id)
        .order_by(Prescription.created_at.desc(), Prescription.id.desc())
        .all()
    )
