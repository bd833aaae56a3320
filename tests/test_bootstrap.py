"""
Tests for first admin creation.
"""
from clinicdb.config import Settings
from clinicdb.core.bootstrap import admin_exists, bootstrap_admin_if_needed
from clinicdb.core.security import verify_password
from clinicdb.models import User, UserRole


def make_settings(**overrides):
    values = {
        "database_url": "sqlite://",
        "bootstrap_admin_email": "Admin@Clinic.example.com",
        "bootstrap_admin_password": "AdminPass1",
    }
    values.update(overrides)
    return Settings(**values)


def test_bootstrap_creates_first_admin(db):
    admin = bootstrap_admin_if_needed(db, make_settings())

    assert admin.role == UserRole.ADMIN
    assert admin.email == "admin@clinic.example.com"
    assert admin.name == "System Administrator"
    assert verify_password("AdminPass1", admin.password_hash)
    assert admin_exists(db)


def test_bootstrap_runs_once(db):
    bootstrap_admin_if_needed(db, make_settings())

    assert bootstrap_admin_if_needed(db, make_settings(bootstrap_admin_email="other@clinic.example.com")) is None
    assert db.query(User).count() == 1


def test_bootstrap_without_credentials_does_nothing(db):
    assert bootstrap_admin_if_needed(db, make_settings(bootstrap_admin_password=None)) is None
    assert not admin_exists(db)
