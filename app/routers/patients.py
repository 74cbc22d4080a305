from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.credentials import login_response, otp_issued_response, verified_response
from app.schemas.common import CredentialsRequest, EmailRequest, VerifyOtpRequest
from app.schemas.doctor import SavedDoctorSummary
from app.schemas.patient import PatientDetail, PatientPersonalInfo, PatientSummary, SavedDoctorRequest
from app.services import credentials_service, patient_service
from app.services.account_kinds import PATIENT
from app.services.email_services import Mailer, get_mailer
from app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.post("/onboarding/auth")
def onboarding_auth(
    body: CredentialsRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    try:
        issued = credentials_service.register(db, PATIENT, body.model_dump(), mailer)
        return otp_issued_response(PATIENT, issued)
    except Exception as exc:
        return handle_exception(exc, "An error occurred during account creation")


@router.post("/onboarding/resend-otp")
def resend_otp(
    body: EmailRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    try:
        issued = credentials_service.resend_otp(db, PATIENT, body.model_dump(), mailer)
        return otp_issued_response(PATIENT, issued, resend=True)
    except Exception as exc:
        return handle_exception(exc, "An error occurred while resending the verification code")


@router.post("/onboarding/verify-otp")
def verify_otp(body: VerifyOtpRequest, db: Session = Depends(get_db)):
    try:
        patient, token = credentials_service.verify_otp(db, PATIENT, body.model_dump())
        return verified_response(PATIENT, patient, token)
    except Exception as exc:
        return handle_exception(exc, "An error occurred during verification")


@router.post("/onboarding/personal-info")
def onboarding_personal_info(body: PatientPersonalInfo, db: Session = Depends(get_db)):
    try:
        patient = patient_service.save_personal_info(db, body.model_dump())
        return create_response(
            message="Personal information saved successfully. Onboarding complete!",
            data={"patientId": patient.id, "email": patient.email, "name": patient.name},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while saving personal information")


@router.post("/login")
def login(body: CredentialsRequest, db: Session = Depends(get_db)):
    try:
        patient, token = credentials_service.login(db, PATIENT, body.model_dump())
        return login_response(PATIENT, patient, token)
    except Exception as exc:
        return handle_exception(exc, "An error occurred during login")


@router.get("/")
def fetch_all(db: Session = Depends(get_db)):
    try:
        patients = [PatientSummary.model_validate(p).to_payload() for p in patient_service.list_patients(db)]
        return create_response(
            message="Patients fetched successfully",
            data=patients,
            count=len(patients),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while fetching patients")


# Saved doctors routes are declared before /{patient_id}
@router.post("/saved-doctors")
def save_doctor(body: SavedDoctorRequest, db: Session = Depends(get_db)):
    try:
        patient_id, doctor_id = patient_service.save_doctor(db, body.model_dump())
        return create_response(
            message="Doctor saved successfully",
            data={"patientId": patient_id, "doctorId": doctor_id},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while saving doctor")


@router.delete("/saved-doctors")
def unsave_doctor(body: SavedDoctorRequest, db: Session = Depends(get_db)):
    try:
        patient_id, doctor_id = patient_service.unsave_doctor(db, body.model_dump())
        return create_response(
            message="Doctor unsaved successfully",
            data={"patientId": patient_id, "doctorId": doctor_id},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while unsaving doctor")


@router.get("/{patient_id}/saved-doctors")
def get_saved_doctors(patient_id: str, db: Session = Depends(get_db)):
    try:
        doctors = [
            SavedDoctorSummary.model_validate(doctor).to_payload()
            for doctor in patient_service.list_saved_doctors(db, patient_id)
        ]
        return create_response(
            message="Saved doctors fetched successfully",
            data=doctors,
            count=len(doctors),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while fetching saved doctors")


@router.get("/{patient_id}")
def fetch_by_id(patient_id: str, db: Session = Depends(get_db)):
    try:
        patient = patient_service.get_patient(db, patient_id)
        return create_response(
            message="Patient fetched successfully",
            data=PatientDetail.model_validate(patient).to_payload(),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while fetching patient")
