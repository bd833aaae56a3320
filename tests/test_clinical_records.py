"""
Tests for medical records and prescriptions.
"""
import pytest

from clinicdb.exceptions import ImmutableRecordError, InactivePatientError, ResourceNotFoundException
from clinicdb.medical_records.schemas import MedicalRecordCreate, MedicalRecordResponse
from clinicdb.medical_records.service import create_medical_record, list_patient_records
from clinicdb.patients.service import deactivate_patient
from clinicdb.prescriptions.schemas import PrescriptionCreate, PrescriptionResponse
from clinicdb.prescriptions.service import create_prescription, list_patient_prescriptions


def test_records_accumulate(db, patient, doctor):
    first = create_medical_record(
        db, MedicalRecordCreate(patient_id=patient.id, doctor_id=doctor.id, diagnosis="Malaria")
    )
    second = create_medical_record(
        db,
        MedicalRecordCreate(patient_id=patient.id, doctor_id=doctor.id, diagnosis="Recovered", notes="Follow-up"),
    )

    records = list_patient_records(db, patient.id)
    assert [r.id for r in records] == [first.id, second.id]
    assert MedicalRecordResponse.model_validate(second).notes == "Follow-up"
    assert {r.id for r in doctor.medical_records} == {first.id, second.id}


def test_record_is_append_only(db, patient, doctor):
    record = create_medical_record(
        db, MedicalRecordCreate(patient_id=patient.id, doctor_id=doctor.id, diagnosis="Malaria")
    )

    record.notes = "edited later"
    with pytest.raises(ImmutableRecordError):
        db.commit()
    db.rollback()


def test_records_allowed_for_deactivated_patient(db, patient, doctor):
    """
    History can still be written for a patient who is no longer active.
    """
    deactivate_patient(db, patient.id)

    record = create_medical_record(
        db, MedicalRecordCreate(patient_id=patient.id, doctor_id=doctor.id, diagnosis="Discharge summary")
    )
    assert record.id is not None


def test_empty_diagnosis_rejected():
    with pytest.raises(ValueError):
        MedicalRecordCreate(patient_id=1, doctor_id=1, diagnosis="")


def test_prescriptions(db, patient, doctor):
    prescription = create_prescription(
        db,
        PrescriptionCreate(
            patient_id=patient.id,
            doctor_id=doctor.id,
            medication="Amoxicillin",
            dosage="500mg three times daily",
            instructions="Take after meals for 7 days",
        ),
    )

    assert PrescriptionResponse.model_validate(prescription).medication == "Amoxicillin"
    assert [p.id for p in list_patient_prescriptions(db, patient.id)] == [prescription.id]
    assert patient.prescriptions[0].doctor is doctor


def test_no_prescriptions_for_deactivated_patient(db, patient, doctor):
    deactivate_patient(db, patient.id)

    with pytest.raises(InactivePatientError):
        create_prescription(db, PrescriptionCreate(patient_id=patient.id, doctor_id=doctor.id, medication="Zinc"))


def test_unknown_doctor(db, patient):
    with pytest.raises(ResourceNotFoundException):
        create_medical_record(db, MedicalRecordCreate(patient_id=patient.id, doctor_id=42, diagnosis="Flu"))
