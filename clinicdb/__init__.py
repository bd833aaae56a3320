"""
Relational data model for the clinic management system.

This package provides:
- SQLAlchemy models for users, doctors, patients, appointments, medical
  records, prescriptions, invoices, payments, inventory and notifications
- Settings loaded from the environment
- Session and transaction helpers
- Service functions for the rules the schema does not enforce
- An Alembic wrapper for provisioning and migrating the schema
"""

__version__ = "1.0.0"
