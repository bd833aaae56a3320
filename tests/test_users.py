"""
Tests for account creation, doctor profiles and password handling.
"""
import pytest
from pydantic import ValidationError

from clinicdb.core.security import is_password_hash, validate_password_strength, verify_password
from clinicdb.doctors.schemas import DoctorCreate, DoctorResponse
from clinicdb.doctors.service import create_doctor, get_doctor, get_doctor_by_license
from clinicdb.exceptions import (
    AppException,
    DuplicateEmailException,
    InvalidRoleError,
    ResourceNotFoundException,
    UniqueViolation,
)
from clinicdb.models import User, UserRole
from clinicdb.users.schemas import UserCreate, UserResponse
from clinicdb.users.service import create_user, deactivate_user, get_user, get_user_by_email


def staff_data(**overrides):
    data = {
        "email": "reception@clinic.example.com",
        "name": "Grace Wanjiru",
        "password": "Reception1",
        "role": UserRole.STAFF,
    }
    data.update(overrides)
    return UserCreate(**data)


def test_create_user_stores_a_hash_not_the_password(db):
    """
    The credential is stored as a salted bcrypt hash.
    """
    user = create_user(db, staff_data())

    assert user.id is not None
    assert user.password_hash != "Reception1"
    assert is_password_hash(user.password_hash)
    assert verify_password("Reception1", user.password_hash)
    assert not verify_password("reception1", user.password_hash)


def test_email_is_normalized_to_lowercase(db):
    user = create_user(db, staff_data(email="Reception@Clinic.Example.com"))

    assert user.email == "reception@clinic.example.com"
    assert get_user_by_email(db, "RECEPTION@clinic.example.com").id == user.id


def test_duplicate_email_is_rejected_regardless_of_case(db):
    create_user(db, staff_data())

    with pytest.raises(DuplicateEmailException) as exc_info:
        create_user(db, staff_data(email="RECEPTION@clinic.example.com", name="Someone Else"))

    assert isinstance(exc_info.value, UniqueViolation)
    assert db.query(User).count() == 1


@pytest.mark.parametrize("password", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
def test_weak_passwords_are_rejected(password):
    assert not validate_password_strength(password)
    with pytest.raises(ValidationError):
        staff_data(password=password)


def test_malformed_email_is_rejected():
    with pytest.raises(ValidationError):
        staff_data(email="not-an-email")


def test_unknown_role_is_rejected():
    with pytest.raises(ValidationError):
        staff_data(role="patient")


def test_user_response_never_exposes_the_hash(db):
    user = create_user(db, staff_data())

    payload = UserResponse.model_validate(user).model_dump()
    assert payload["email"] == "reception@clinic.example.com"
    assert payload["role"] == UserRole.STAFF
    assert "password_hash" not in payload


def test_deactivate_user(db):
    user = create_user(db, staff_data())

    deactivate_user(db, user.id)

    assert get_user(db, user.id).is_active is False


def test_get_missing_user(db):
    with pytest.raises(ResourceNotFoundException):
        get_user(db, 404)


def test_create_doctor_writes_account_and_profile(db, doctor):
    """
    A doctor is a doctor-role account plus a profile that points at it.
    """
    assert doctor.user.role == UserRole.DOCTOR
    assert doctor.user.doctor_profile is doctor
    assert doctor.name == "Jane Smith"
    assert doctor.email == "dr.jane@clinic.example.com"
    assert get_doctor(db, doctor.id) is doctor
    assert get_doctor_by_license(db, "LIC-0001") is doctor

    response = DoctorResponse.model_validate(doctor)
    assert response.user.email == "dr.jane@clinic.example.com"
    assert response.license_number == "LIC-0001"


def test_duplicate_license_number_is_rejected(db, doctor):
    with pytest.raises(UniqueViolation):
        create_doctor(
            db,
            DoctorCreate(
                email="dr.omondi@clinic.example.com",
                name="Paul Omondi",
                password="Secure123",
                license_number="LIC-0001",
            ),
        )

    # Neither the account nor the profile was written
    assert get_user_by_email(db, "dr.omondi@clinic.example.com") is None


def test_doctor_profile_requires_doctor_role(db):
    with pytest.raises(InvalidRoleError) as excinfo:
        create_doctor(
            db,
            DoctorCreate(
                email="admin@clinic.example.com",
                name="Admin",
                password="Secure123",
                role=UserRole.ADMIN,
            ),
        )

    assert isinstance(excinfo.value, AppException)
    assert get_user_by_email(db, "admin@clinic.example.com") is None


def test_missing_doctor(db):
    with pytest.raises(ResourceNotFoundException):
        get_doctor(db, 12)
    with pytest.raises(ResourceNotFoundException):
        get_doctor_by_license(db, "NOPE")
