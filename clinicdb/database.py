"""
Database connection and session management.
Provides SQLAlchemy engine, session, and base class for models.
"""
import logging
from contextlib import contextmanager
from typing import Callable, Optional, TypeVar

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings
from .exceptions import sqlstate_of, translate_integrity_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Deterministic constraint names so migrations and models agree
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Serialization failure and deadlock
RETRYABLE_SQLSTATES = ("40001", "40P01")

# Create base class for declarative models
Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

# Create session factory for database sessions; bound by init_engine()
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=True)

engine: Optional[Engine] = None


def enum_values(enum_class):
    """Store enum members by their lowercase value rather than their name."""
    return [member.value for member in enum_class]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, echo: bool = False,
                     isolation_level: Optional[str] = None, **kwargs) -> Engine:
    """
    Create a SQLAlchemy engine for the given connection string.

    SQLite connections get foreign key enforcement switched on, since SQLite
    ignores REFERENCES clauses otherwise.

    Args:
        database_url: SQLAlchemy connection string
        echo: Log emitted SQL
        isolation_level: Optional isolation level applied to every connection
        **kwargs: Passed through to create_engine

    Returns:
        Engine: Configured engine
    """
    if isolation_level:
        kwargs["isolation_level"] = isolation_level
    if not database_url.startswith("sqlite"):
        kwargs.setdefault("pool_pre_ping", True)

    db_engine = create_engine(database_url, echo=echo, **kwargs)

    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)

    return db_engine


def init_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create the process-wide engine and bind the session factory to it.

    Args:
        database_url: Overrides the configured DATABASE_URL when given

    Returns:
        Engine: The bound engine
    """
    global engine

    settings = get_settings() if database_url is None else None
    if settings is not None:
        engine = create_db_engine(
            settings.database_url,
            echo=settings.sql_echo,
            isolation_level=settings.db_isolation_level,
        )
    else:
        engine = create_db_engine(database_url)

    SessionLocal.configure(bind=engine)
    logger.info(f"Database engine initialised for dialect '{engine.dialect.name}'")
    return engine


def get_db():
    """
    Database dependency - Creates and yields a database session.

    The session is automatically closed after use, even if an exception
    occurs while it is in use.

    Yields:
        SQLAlchemy Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Run a block of writes as one unit of work.

    Commits when the block completes, rolls back on any exception. Integrity
    errors are re-raised as ConstraintViolation subclasses.

    Args:
        db: Database session

    Yields:
        Session: The same session
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        violation = translate_integrity_error(exc)
        logger.error(f"Transaction rolled back: {violation.__class__.__name__}: {violation.detail}")
        raise violation from exc
    except Exception:
        db.rollback()
        raise


def is_retryable(exc: Exception) -> bool:
    """Whether a database error is a transient serialization failure."""
    return isinstance(exc, DBAPIError) and sqlstate_of(exc) in RETRYABLE_SQLSTATES


def run_in_transaction(session_factory: Callable[[], Session],
                       work: Callable[[Session], T],
                       attempts: Optional[int] = None) -> T:
    """
    Run work(session) in a fresh transaction, retrying serialization failures.

    Each attempt uses a new session. Only serialization failures and deadlocks
    are retried; every other error propagates on the first occurrence.

    Args:
        session_factory: Callable returning a new Session
        work: Function receiving the session and returning a result
        attempts: Maximum attempts, defaults to DB_RETRY_ATTEMPTS

    Returns:
        Whatever work returns
    """
    if attempts is None:
        attempts = get_settings().db_retry_attempts

    for attempt in range(1, attempts + 1):
        db = session_factory()
        try:
            with transaction(db):
                return work(db)
        except DBAPIError as exc:
            if not is_retryable(exc) or attempt == attempts:
                raise
            logger.warning(f"Serialization failure on attempt {attempt}/{attempts}, retrying")
        finally:
            db.close()
