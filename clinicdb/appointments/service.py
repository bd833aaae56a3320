"""
Appointment Service - Booking and status changes.

Status moves one way only: scheduled -> completed or scheduled -> cancelled.
"""
import logging
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session

from ..database import transaction
from ..doctors.service import get_doctor
from ..exceptions import InvalidStatusTransition, ResourceNotFoundException
from ..patients.service import get_active_patient
from .models import Appointment, AppointmentStatus
from .schemas import AppointmentCreate

# Set up logging
logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def get_appointment(db: Session, appointment_id: int) -> Appointment:
    """
    Get an appointment by ID.

    Raises:
        ResourceNotFoundException: If appointment not found
    """
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise ResourceNotFoundException(f"Appointment {appointment_id} not found")
    return appointment


def create_appointment(db: Session, appointment_data: AppointmentCreate) -> Appointment:
    """
    Book an appointment.

    Args:
        db: Database session
        appointment_data: Patient, doctor, time and reason

    Returns:
        Appointment: The scheduled appointment

    Raises:
        ResourceNotFoundException: If the patient or doctor does not exist
        InactivePatientError: If the patient has been deactivated
    """
    with transaction(db):
        get_active_patient(db, appointment_data.patient_id)
        get_doctor(db, appointment_data.doctor_id)
        appointment = Appointment(
            patient_id=appointment_data.patient_id,
            doctor_id=appointment_data.doctor_id,
            scheduled_at=appointment_data.scheduled_at,
            reason=appointment_data.reason,
            status=AppointmentStatus.SCHEDULED,
        )
        db.add(appointment)

    db.refresh(appointment)
    logger.info(
        f"Appointment {appointment.id} booked for patient {appointment.patient_id} "
        f"with doctor {appointment.doctor_id}"
    )
    return appointment


def update_appointment_status(db: Session, appointment_id: int, status: AppointmentStatus) -> Appointment:
    """
    Move an appointment to a new status.

    Args:
        db: Database session
        appointment_id: ID of the appointment
        status: Requested status

    Returns:
        Appointment: The updated appointment

    Raises:
        InvalidStatusTransition: If the move is not allowed from the current status
    """
    status = AppointmentStatus(status)
    with transaction(db):
        appointment = get_appointment(db, appointment_id)
        if status not in ALLOWED_TRANSITIONS[appointment.status]:
            raise InvalidStatusTransition("Appointment", appointment.status, status)
        appointment.status = status

    db.refresh(appointment)
    logger.info(f"Appointment {appointment_id} is now {status.value}")
    return appointment


def complete_appointment(db: Session, appointment_id: int) -> Appointment:
    return update_appointment_status(db, appointment_id, AppointmentStatus.COMPLETED)


def cancel_appointment(db: Session, appointment_id: int) -> Appointment:
    return update_appointment_status(db, appointment_id, AppointmentStatus.CANCELLED)


def list_doctor_appointments(db: Session, doctor_id: int,
                             status: Optional[AppointmentStatus] = None) -> List[Appointment]:
    """List a doctor's appointments in time order, optionally by status."""
    query = db.query(Appointment).filter(Appointment.doctor_id == doctor_id)
    if status is not None:
        query = query.filter(Appointment.status == AppointmentStatus(status))
    return query.order_by(Appointment.scheduled_at).all()
