"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string (required)
        sql_echo: Echo emitted SQL to the log
        db_isolation_level: Optional engine-wide transaction isolation level
        db_retry_attempts: Attempts for work retried on serialization failures
        log_level: Root log level used by clinicdb-migrate (DEBUG, INFO, WARNING, ERROR, CRITICAL)

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Optional admin email for first admin creation
        bootstrap_admin_password: Optional admin password for first admin creation
        bootstrap_admin_name: Display name for the bootstrap admin
    """
    # Database settings
    database_url: str
    sql_echo: bool = False
    db_isolation_level: Optional[str] = None
    db_retry_attempts: int = 3

    log_level: str = "INFO"

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "System Administrator"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    @field_validator("database_url")
    @classmethod
    def check_database_url(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("DATABASE_URL is empty")
        try:
            make_url(value)
        except ArgumentError as exc:
            raise ValueError(f"DATABASE_URL is not a valid connection string: {exc}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL {value!r} is not a logging level")
        return level

    @field_validator("db_retry_attempts")
    @classmethod
    def check_retry_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("DB_RETRY_ATTEMPTS must be at least 1")
        return value


@lru_cache
def get_settings() -> Settings:
    """
    Load and cache the application settings.

    Returns:
        Settings: Validated settings

    Raises:
        ConfigurationError: If DATABASE_URL is missing or malformed
    """
    try:
        return Settings()
    except ValidationError as exc:
        logger.critical(f"Invalid configuration: {exc}")
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
