import logging

from sqlalchemy.orm import Session

from app.models.doctor import Doctor
from app.models.lead import Lead
from app.models.patient import Patient
from app.services import account_store
from app.services.account_kinds import DOCTOR
from app.services.account_store import StoreStatus
from app.services.onboarding_fsm import OnboardingAction
from app.services.onboarding_service import submit_step
from app.services.validators import (
    validate_address,
    validate_available_days,
    validate_city,
    validate_contact_number,
    validate_doctor_age,
    validate_gender,
    validate_languages,
    validate_locality,
    validate_name,
    validate_qualification,
    validate_specialty,
    validate_timing,
    validate_uuid,
    validate_whatsapp_number,
    validate_years_of_experience,
)
from app.utils.response import not_found

logger = logging.getLogger(__name__)

PERSONAL_INFO_RULES = (
    ("name", validate_name),
    ("age", validate_doctor_age),
    ("gender", validate_gender),
    ("languages", validate_languages),
    ("contact_number", validate_contact_number),
    ("whatsapp_number", validate_whatsapp_number),
)

PROFESSIONAL_INFO_RULES = (
    ("specialty", validate_specialty),
    ("years_of_experience", validate_years_of_experience),
    ("latest_qualification", validate_qualification),
)

AVAILABILITY_RULES = (
    ("address", validate_address),
    ("city", validate_city),
    ("locality", validate_locality),
    ("available_days", validate_available_days),
    ("available_timing", validate_timing),
)


def save_personal_info(db: Session, payload: dict) -> Doctor:
    return submit_step(
        db,
        DOCTOR,
        OnboardingAction.PERSONAL_INFO,
        payload.get("doctor_id"),
        payload,
        PERSONAL_INFO_RULES,
        "All fields are required: name, age, gender, languages, contactNumber, whatsappNumber",
    )


def save_professional_info(db: Session, payload: dict) -> Doctor:
    return submit_step(
        db,
        DOCTOR,
        OnboardingAction.PROFESSIONAL_INFO,
        payload.get("doctor_id"),
        payload,
        PROFESSIONAL_INFO_RULES,
        "All fields are required: specialty, yearsOfExperience, latestQualification",
    )


def save_availability(db: Session, payload: dict) -> Doctor:
    return submit_step(
        db,
        DOCTOR,
        OnboardingAction.AVAILABILITY,
        payload.get("doctor_id"),
        payload,
        AVAILABILITY_RULES,
        "All fields are required: address, city, locality, availableDays, availableTiming",
    )


def list_doctors(db: Session) -> list[Doctor]:
    return db.query(Doctor).order_by(Doctor.created_at.asc()).all()


def get_doctor(db: Session, doctor_id: str) -> Doctor:
    doctor = account_store.get_by_id(db, Doctor, doctor_id)
    if not doctor:
        raise not_found("DOCTOR_NOT_FOUND", "Doctor not found")
    return doctor


def view_profile(db: Session, doctor_id: str, patient_id: str | None = None) -> Doctor:
    result = account_store.increment_view_count(db, doctor_id)
    if result.status == StoreStatus.NOT_FOUND:
        raise not_found("DOCTOR_NOT_FOUND", "Doctor not found")

    if patient_id and validate_uuid(patient_id, "INVALID_PATIENT_ID_FORMAT", "patient").valid:
        if account_store.get_by_id(db, Patient, patient_id):
            account_store.upsert_lead(db, doctor_id, patient_id)
        else:
            logger.info("View of doctor %s names unknown patient %s; lead skipped", doctor_id, patient_id)
    return result.record


def list_leads(db: Session, doctor_id: str) -> list[Lead]:
    get_doctor(db, doctor_id)
    return (
        db.query(Lead)
        .filter(Lead.doctor_id == doctor_id)
        .order_by(Lead.viewed_at.desc())
        .all()
    )
