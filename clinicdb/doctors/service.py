"""
Doctor Service - Business logic for doctor profile management.

A doctor is a User with role=doctor plus a Doctor profile row; both are
written in one transaction.
"""
import logging

from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import InvalidRoleError, ResourceNotFoundException, UniqueViolation
from ..users.models import UserRole
from ..users.service import build_user
from .models import Doctor
from .schemas import DoctorCreate

# Set up logging
logger = logging.getLogger(__name__)


def get_doctor(db: Session, doctor_id: int) -> Doctor:
    """
    Get a doctor profile by ID.

    Args:
        db: Database session
        doctor_id: ID of the doctor profile

    Returns:
        Doctor: Doctor profile

    Raises:
        ResourceNotFoundException: If doctor profile not found
    """
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if not doctor:
        raise ResourceNotFoundException(f"Doctor {doctor_id} not found")
    return doctor


def get_doctor_by_license(db: Session, license_number: str) -> Doctor:
    """Get a doctor profile by license number."""
    doctor = db.query(Doctor).filter(Doctor.license_number == license_number).first()
    if not doctor:
        raise ResourceNotFoundException(f"No doctor with license {license_number}")
    return doctor


def create_doctor(db: Session, doctor_data: DoctorCreate) -> Doctor:
    """
    Create a doctor account and its profile.

    Args:
        db: Database session
        doctor_data: Account and professional details

    Returns:
        Doctor: The created doctor profile

    Raises:
        DuplicateEmailException: If the email is already registered
        UniqueViolation: If the license number is already registered
        InvalidRoleError: If the account role is not doctor
    """
    if doctor_data.role != UserRole.DOCTOR:
        raise InvalidRoleError("Doctor profiles can only be created for the doctor role")

    with transaction(db):
        if doctor_data.license_number and db.query(Doctor).filter(
            Doctor.license_number == doctor_data.license_number
        ).first():
            raise UniqueViolation(
                f"License number {doctor_data.license_number} already registered",
                constraint="uq_doctors_license_number",
            )

        user = build_user(db, doctor_data)
        doctor = Doctor(
            user=user,
            specialization=doctor_data.specialization,
            license_number=doctor_data.license_number,
        )
        db.add(doctor)

    db.refresh(doctor)
    logger.info(f"Created doctor profile {doctor.id} for user {doctor.user_id}")
    return doctor
