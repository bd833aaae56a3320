"""
User Service - Account creation and lookup.

This module provides service functions for creating accounts with hashed
credentials and normalized, unique email addresses.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.security import hash_password
from ..database import transaction
from ..exceptions import DuplicateEmailException, ResourceNotFoundException
from .models import User
from .schemas import UserCreate

# Set up logging
logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User:
    """
    Get a user by ID.

    Args:
        db: Database session
        user_id: ID of the user

    Returns:
        User: The user

    Raises:
        ResourceNotFoundException: If the user does not exist
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise ResourceNotFoundException(f"User {user_id} not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look a user up by email, ignoring case."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def build_user(db: Session, user_data: UserCreate) -> User:
    """
    Build and add a User from creation data without committing.

    Raises:
        DuplicateEmailException: If the email is already registered
    """
    if get_user_by_email(db, user_data.email):
        raise DuplicateEmailException(f"Email {user_data.email} already registered")

    user = User(
        name=user_data.name,
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        role=user_data.role,
        phone=user_data.phone,
        address=user_data.address,
    )
    db.add(user)
    return user


def create_user(db: Session, user_data: UserCreate) -> User:
    """
    Create a new account.

    Args:
        db: Database session
        user_data: Validated account data

    Returns:
        User: The created user

    Raises:
        DuplicateEmailException: If the email is already registered
        UniqueViolation: If a concurrent insert claimed the email first
    """
    with transaction(db):
        user = build_user(db, user_data)

    db.refresh(user)
    logger.info(f"Created {user.role.value} account {user.id}")
    return user


def deactivate_user(db: Session, user_id: int) -> User:
    """Disable an account without deleting it."""
    with transaction(db):
        user = get_user(db, user_id)
        user.is_active = False

    db.refresh(user)
    logger.info(f"Deactivated user {user_id}")
    return user
