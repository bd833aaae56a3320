"""
Exception classes for the clinic data model and its service layer.

Configuration, constraint-violation and migration errors always propagate to the
caller; nothing here is recovered locally.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.
    """
    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ConfigurationError(AppException):
    """Raised when required settings are missing or malformed."""


class MigrationError(AppException):
    """Raised when a schema migration fails against the live database."""


class ResourceNotFoundException(AppException):
    """Exception raised when a referenced row does not exist."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail)


# Constraint violations reported by the database

class ConstraintViolation(AppException):
    """
    A write rejected by a database constraint.

    Attributes:
        detail: Human readable description
        constraint: Constraint name when the driver reports it
    """
    def __init__(self, detail: str, constraint: Optional[str] = None):
        super().__init__(detail)
        self.constraint = constraint


class UniqueViolation(ConstraintViolation):
    """Duplicate value in a unique column."""


class DuplicateEmailException(UniqueViolation):
    """Exception raised when email already exists."""
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(detail, constraint="ix_users_email")


class ForeignKeyViolation(ConstraintViolation):
    """Reference to a row that does not exist, or delete of a referenced row."""


class NotNullViolation(ConstraintViolation):
    """Missing value for a required column."""


class CheckViolation(ConstraintViolation):
    """Value outside the domain allowed by a CHECK constraint."""


# Rules enforced by the service layer

class BusinessRuleViolation(AppException):
    """Base class for rules the schema itself does not enforce."""


class InvalidStatusTransition(BusinessRuleViolation):
    """Exception raised when a status change is not allowed."""
    def __init__(self, entity: str, current, requested):
        current_value = current.value if hasattr(current, "value") else str(current)
        requested_value = requested.value if hasattr(requested, "value") else str(requested)
        super().__init__(f"{entity} cannot move from '{current_value}' to '{requested_value}'")
        self.current = current
        self.requested = requested


class OverpaymentError(BusinessRuleViolation):
    """Exception raised when payments would exceed the invoice amount."""


class InsufficientStockError(BusinessRuleViolation):
    """Exception raised when a stock adjustment would go below zero."""


class InactivePatientError(BusinessRuleViolation):
    """Exception raised when an operation targets a deactivated patient."""


class ImmutableRecordError(BusinessRuleViolation):
    """Exception raised when an append-only record is modified."""


class InvoiceStatusMismatch(BusinessRuleViolation):
    """Exception raised when a manual invoice status disagrees with its payments."""


class AppointmentPatientMismatch(BusinessRuleViolation):
    """Exception raised when an invoice references another patient's appointment."""


class InvalidRoleError(BusinessRuleViolation):
    """Exception raised when an account has the wrong role for the operation."""


class MissingRecipientError(BusinessRuleViolation):
    """Exception raised when a notification query names no recipient."""


# PostgreSQL SQLSTATE codes for integrity errors
_SQLSTATE_CLASSES = {
    "23505": UniqueViolation,
    "23503": ForeignKeyViolation,
    "23502": NotNullViolation,
    "23514": CheckViolation,
}

# Message fragments used by SQLite and other drivers without SQLSTATE
_MESSAGE_CLASSES = (
    ("unique", UniqueViolation),
    ("duplicate", UniqueViolation),
    ("foreign key", ForeignKeyViolation),
    ("not null", NotNullViolation),
    ("null value", NotNullViolation),
    ("check constraint", CheckViolation),
)


def sqlstate_of(exc: Exception) -> Optional[str]:
    """Return the SQLSTATE code carried by a DBAPI error, if any."""
    orig = getattr(exc, "orig", exc)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    """
    Map a SQLAlchemy IntegrityError onto the constraint violation taxonomy.

    Args:
        exc: The IntegrityError raised on flush or commit

    Returns:
        ConstraintViolation: The most specific subclass that matches
    """
    orig = exc.orig
    message = str(orig)
    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)

    code = sqlstate_of(exc)
    if code in _SQLSTATE_CLASSES:
        return _SQLSTATE_CLASSES[code](message, constraint=constraint)

    lowered = message.lower()
    for fragment, violation_class in _MESSAGE_CLASSES:
        if fragment in lowered:
            return violation_class(message, constraint=constraint)

    logger.warning(f"Unclassified integrity error: {message}")
    return ConstraintViolation(message, constraint=constraint)
