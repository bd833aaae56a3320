"""
Core security utilities for password handling.
"""
from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Salted bcrypt hash
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    return pwd_context.verify(plain_password, hashed_password)


def is_password_hash(value: str) -> bool:
    """Whether a stored value is a hash this context recognises."""
    return pwd_context.identify(value) is not None


def validate_password_strength(password: str) -> bool:
    """
    Validate password strength.

    Args:
        password: Password to validate

    Returns:
        bool: True if password meets strength requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False

    # At least one uppercase letter, one lowercase letter and one digit
    if not any(c.isupper() for c in password):
        return False
    if not any(c.islower() for c in password):
        return False
    if not any(c.isdigit() for c in password):
        return False

    return True
