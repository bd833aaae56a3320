"""
Test configuration for the clinic data model.
"""
from datetime import date

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinicdb.config import get_settings
from clinicdb.database import create_db_engine
from clinicdb.doctors.schemas import DoctorCreate
from clinicdb.doctors.service import create_doctor
from clinicdb.models import Base
from clinicdb.patients.schemas import PatientCreate
from clinicdb.patients.service import create_patient

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine; foreign keys are switched on by create_db_engine
engine = create_db_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """
    Settings are cached per process; make every test read the environment afresh.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def session_factory():
    """
    Create a fresh schema and hand out the session factory bound to it.
    """
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """
    Create a fresh database session for each test.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def doctor(db):
    """A doctor account with its profile."""
    return create_doctor(
        db,
        DoctorCreate(
            email="dr.jane@clinic.example.com",
            name="Jane Smith",
            password="Secure123",
            specialization="General Medicine",
            license_number="LIC-0001",
        ),
    )


@pytest.fixture
def patient(db):
    """A standalone patient with no login."""
    return create_patient(db, PatientCreate(name="John Doe", date_of_birth=date(1990, 1, 1)))
