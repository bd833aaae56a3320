"""
Bootstrap utilities for first admin creation.
Handles automatic creation of the first admin user from environment variables.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..users.models import User, UserRole
from ..users.schemas import UserCreate
from ..users.service import create_user

logger = logging.getLogger(__name__)


def admin_exists(db: Session) -> bool:
    """
    Check if any admin user exists in the database.

    Args:
        db: Database session

    Returns:
        bool: True if at least one admin exists, False otherwise
    """
    return db.query(User).filter(User.role == UserRole.ADMIN).count() > 0


def bootstrap_admin_if_needed(db: Session, settings: Optional[Settings] = None) -> Optional[User]:
    """
    Create the first admin from BOOTSTRAP_ADMIN_* settings when no admin exists.

    Args:
        db: Database session
        settings: Settings to read credentials from, defaults to get_settings()

    Returns:
        User: The created admin, or None when nothing was created
    """
    settings = settings or get_settings()

    if admin_exists(db):
        logger.info("Admin account already exists, skipping bootstrap")
        return None

    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.warning("Bootstrap admin credentials not provided in environment variables")
        return None

    admin = create_user(
        db,
        UserCreate(
            email=settings.bootstrap_admin_email,
            name=settings.bootstrap_admin_name,
            password=settings.bootstrap_admin_password,
            role=UserRole.ADMIN,
        ),
    )
    logger.info(f"Bootstrap admin created: {admin.email}")
    return admin
