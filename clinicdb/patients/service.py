"""
Patient Service - Intake, updates and soft deactivation of patients.

Patients are never hard-deleted here: clinical and financial rows keep
referencing them, so deactivation is the only way out.
"""
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ..database import transaction
from ..exceptions import InactivePatientError, ResourceNotFoundException
from .models import Patient
from .schemas import PatientCreate, PatientUpdate

# Set up logging
logger = logging.getLogger(__name__)


def get_patient(db: Session, patient_id: int) -> Patient:
    """
    Get a patient by ID.

    Raises:
        ResourceNotFoundException: If patient not found
    """
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise ResourceNotFoundException(f"Patient {patient_id} not found")
    return patient


def get_active_patient(db: Session, patient_id: int) -> Patient:
    """
    Get a patient that can still receive new clinical or billing rows.

    Raises:
        ResourceNotFoundException: If patient not found
        InactivePatientError: If the patient has been deactivated
    """
    patient = get_patient(db, patient_id)
    if not patient.is_active:
        raise InactivePatientError(f"Patient {patient_id} is deactivated")
    return patient


def get_patient_with_appointments(db: Session, patient_id: int) -> Patient:
    """
    Fetch a patient together with all of its appointments in two queries.
    """
    patient = (
        db.query(Patient)
        .options(selectinload(Patient.appointments))
        .filter(Patient.id == patient_id)
        .first()
    )
    if not patient:
        raise ResourceNotFoundException(f"Patient {patient_id} not found")
    return patient


def create_patient(db: Session, patient_data: PatientCreate) -> Patient:
    """
    Register a patient at intake.

    Args:
        db: Database session
        patient_data: Demographic and contact details

    Returns:
        Patient: The created patient
    """
    patient = Patient(**patient_data.model_dump())
    with transaction(db):
        db.add(patient)

    db.refresh(patient)
    logger.info(f"Registered patient {patient.id}")
    return patient


def update_patient(db: Session, patient_id: int, patient_data: PatientUpdate) -> Patient:
    """
    Apply the fields that were set on patient_data.

    Raises:
        ResourceNotFoundException: If patient not found
    """
    with transaction(db):
        patient = get_patient(db, patient_id)
        update_data = patient_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(patient, field, value)

    db.refresh(patient)
    logger.info(f"Patient {patient_id} updated: {sorted(update_data)}")
    return patient


def deactivate_patient(db: Session, patient_id: int) -> Patient:
    """
    Soft-deactivate a patient. History stays intact.
    """
    with transaction(db):
        patient = get_patient(db, patient_id)
        patient.is_active = False

    db.refresh(patient)
    logger.info(f"Patient {patient_id} deactivated")
    return patient


def search_patients(db: Session, term: str, include_inactive: bool = False, limit: int = 50) -> List[Patient]:
    """
    Search patients by name, email or phone.

    Args:
        db: Database session
        term: Substring to look for
        include_inactive: Also return deactivated patients
        limit: Maximum number of results

    Returns:
        List[Patient]: Matching patients ordered by name
    """
    # % and _ in the term match literally
    term = term.strip()
    query = db.query(Patient).filter(
        or_(
            Patient.name.icontains(term, autoescape=True),
            Patient.email.icontains(term, autoescape=True),
            Patient.phone.icontains(term, autoescape=True),
        )
    )
    if not include_inactive:
        query = query.filter(Patient.is_active.is_(True))
    return query.order_by(Patient.name).limit(limit).all()
