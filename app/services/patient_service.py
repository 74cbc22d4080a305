import logging

from sqlalchemy.orm import Session

from app.models.doctor import Doctor
from app.models.patient import Patient
from app.services import account_store
from app.services.account_kinds import PATIENT
from app.services.account_store import StoreStatus
from app.services.onboarding_fsm import OnboardingAction
from app.services.onboarding_service import submit_step
from app.services.validators import (
    missing_fields,
    validate_city,
    validate_gender,
    validate_name,
    validate_patient_age,
    validate_phone,
    validate_uuid,
)
from app.utils.response import bad_request, not_found

logger = logging.getLogger(__name__)

PERSONAL_INFO_RULES = (
    ("name", validate_name),
    ("phone", validate_phone),
    ("gender", validate_gender),
    ("age", validate_patient_age),
    ("city", validate_city),
)


def save_personal_info(db: Session, payload: dict) -> Patient:
    return submit_step(
        db,
        PATIENT,
        OnboardingAction.PERSONAL_INFO,
        payload.get("patient_id"),
        payload,
        PERSONAL_INFO_RULES,
        "All fields are required: name, phone, gender, age, city",
    )


def list_patients(db: Session) -> list[Patient]:
    return db.query(Patient).order_by(Patient.created_at.asc()).all()


def get_patient(db: Session, patient_id: str) -> Patient:
    patient = account_store.get_by_id(db, Patient, patient_id)
    if not patient:
        raise not_found("PATIENT_NOT_FOUND", "Patient not found")
    return patient


def _require_pair(payload: dict) -> tuple[str, str]:
    if missing_fields(payload, ("patient_id", "doctor_id")):
        raise bad_request("MISSING_FIELDS", "Patient ID and Doctor ID are required")
    return str(payload["patient_id"]), str(payload["doctor_id"])


def save_doctor(db: Session, payload: dict) -> tuple[str, str]:
    patient_id, doctor_id = _require_pair(payload)
    for value, error, label in (
        (patient_id, "INVALID_PATIENT_ID_FORMAT", "patient"),
        (doctor_id, "INVALID_DOCTOR_ID_FORMAT", "doctor"),
    ):
        result = validate_uuid(value, error, label)
        if not result.valid:
            raise bad_request(result.error, result.message)

    get_patient(db, patient_id)
    if not account_store.get_by_id(db, Doctor, doctor_id):
        raise not_found("DOCTOR_NOT_FOUND", "Doctor not found")

    if account_store.is_doctor_saved(db, patient_id, doctor_id):
        raise bad_request("DOCTOR_ALREADY_SAVED", "Doctor is already saved")

    result = account_store.add_saved_doctor(db, patient_id, doctor_id)
    if result.status == StoreStatus.CONFLICT:
        # Lost a race with a concurrent save of the same pair.
        raise bad_request("DOCTOR_ALREADY_SAVED", "This doctor is already saved by this patient")

    logger.info("Patient %s saved doctor %s", patient_id, doctor_id)
    return patient_id, doctor_id


def unsave_doctor(db: Session, payload: dict) -> tuple[str, str]:
    patient_id, doctor_id = _require_pair(payload)
    get_patient(db, patient_id)
    result = account_store.remove_saved_doctor(db, patient_id, doctor_id)
    if result.status == StoreStatus.NOT_FOUND:
        logger.debug("Patient %s had not saved doctor %s", patient_id, doctor_id)
    return patient_id, doctor_id


def list_saved_doctors(db: Session, patient_id: str) -> list[Doctor]:
    get_patient(db, patient_id)
    return account_store.list_saved_doctors(db, patient_id)
