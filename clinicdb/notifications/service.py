"""
Notification Service.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import MissingRecipientError, ResourceNotFoundException
from ..patients.service import get_patient
from ..users.service import get_user
from .models import Notification
from .schemas import NotificationCreate

logger = logging.getLogger(__name__)


def create_notification(db: Session, notification_data: NotificationCreate) -> Notification:
    """
    Create an unread notification for a user, a patient, or both.

    Raises:
        ResourceNotFoundException: If a recipient does not exist
    """
    with transaction(db):
        if notification_data.user_id is not None:
            get_user(db, notification_data.user_id)
        if notification_data.patient_id is not None:
            get_patient(db, notification_data.patient_id)
        notification = Notification(**notification_data.model_dump(), is_read=False)
        db.add(notification)

    db.refresh(notification)
    return notification


def mark_as_read(db: Session, notification_id: int) -> Notification:
    with transaction(db):
        notification = db.query(Notification).filter(Notification.id == notification_id).first()
        if not notification:
            raise ResourceNotFoundException(f"Notification {notification_id} not found")
        notification.is_read = True

    db.refresh(notification)
    return notification


def list_unread(db: Session, user_id: Optional[int] = None,
                patient_id: Optional[int] = None) -> List[Notification]:
    """
    Unread notifications for a user or a patient, newest first.
    """
    if user_id is None and patient_id is None:
        raise MissingRecipientError("Pass a user_id or a patient_id")

    query = db.query(Notification).filter(Notification.is_read.is_(False))
    if user_id is not None:
        query = query.filter(Notification.user_id == user_id)
    if patient_id is not None:
        query = query.filter(Notification.patient_id == patient_id)
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()
