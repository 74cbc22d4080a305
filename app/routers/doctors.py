from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.credentials import login_response, otp_issued_response, verified_response
from app.schemas.common import CredentialsRequest, EmailRequest, VerifyOtpRequest
from app.schemas.doctor import (
    DoctorAvailability,
    DoctorDetail,
    DoctorPersonalInfo,
    DoctorProfessionalInfo,
    DoctorSummary,
    LeadResponse,
    ProfileView,
)
from app.services import credentials_service, doctor_service
from app.services.account_kinds import DOCTOR
from app.services.email_services import Mailer, get_mailer
from app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/doctors", tags=["Doctors"])


@router.post("/onboarding/auth")
def onboarding_auth(
    body: CredentialsRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    try:
        issued = credentials_service.register(db, DOCTOR, body.model_dump(), mailer)
        return otp_issued_response(DOCTOR, issued)
    except Exception as exc:
        return handle_exception(exc, "An error occurred during account creation")


@router.post("/onboarding/resend-otp")
def resend_otp(
    body: EmailRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    try:
        issued = credentials_service.resend_otp(db, DOCTOR, body.model_dump(), mailer)
        return otp_issued_response(DOCTOR, issued, resend=True)
    except Exception as exc:
        return handle_exception(exc, "An error occurred while resending the verification code")


@router.post("/onboarding/verify-otp")
def verify_otp(body: VerifyOtpRequest, db: Session = Depends(get_db)):
    try:
        doctor, token = credentials_service.verify_otp(db, DOCTOR, body.model_dump())
        return verified_response(DOCTOR, doctor, token)
    except Exception as exc:
        return handle_exception(exc, "An error occurred during verification")


@router.post("/onboarding/personal-info")
def onboarding_personal_info(body: DoctorPersonalInfo, db: Session = Depends(get_db)):
    try:
        doctor = doctor_service.save_personal_info(db, body.model_dump())
        return create_response(
            message="Personal information saved successfully",
            data={"doctorId": doctor.id, "onboardingStep": doctor.onboarding_step},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while saving personal information")


@router.post("/onboarding/professional-info")
def onboarding_professional_info(body: DoctorProfessionalInfo, db: Session = Depends(get_db)):
    try:
        doctor = doctor_service.save_professional_info(db, body.model_dump())
        return create_response(
            message="Professional information saved successfully",
            data={"doctorId": doctor.id, "onboardingStep": doctor.onboarding_step},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while saving professional information")


@router.post("/onboarding/availability")
def onboarding_availability(body: DoctorAvailability, db: Session = Depends(get_db)):
    try:
        doctor = doctor_service.save_availability(db, body.model_dump())
        return create_response(
            message="Onboarding completed successfully! Welcome to ECare+.",
            data={
                "doctorId": doctor.id,
                "onboardingStep": doctor.onboarding_step,
                "email": doctor.email,
                "name": doctor.name,
            },
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while saving availability information")


@router.post("/login")
def login(body: CredentialsRequest, db: Session = Depends(get_db)):
    try:
        doctor, token = credentials_service.login(db, DOCTOR, body.model_dump())
        return login_response(DOCTOR, doctor, token)
    except Exception as exc:
        return handle_exception(exc, "An error occurred during login")


@router.get("/")
def fetch_all(db: Session = Depends(get_db)):
    try:
        doctors = [DoctorSummary.model_validate(doctor).to_payload() for doctor in doctor_service.list_doctors(db)]
        return create_response(
            message="Doctors fetched successfully",
            data=doctors,
            count=len(doctors),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while fetching doctors")


@router.get("/{doctor_id}")
def fetch_by_id(doctor_id: str, db: Session = Depends(get_db)):
    try:
        doctor = doctor_service.get_doctor(db, doctor_id)
        return create_response(
            message="Doctor fetched successfully",
            data=DoctorDetail.model_validate(doctor).to_payload(),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while fetching doctor")


@router.post("/{doctor_id}/view")
def view_doctor_profile(doctor_id: str, body: ProfileView | None = None, db: Session = Depends(get_db)):
    try:
        patient_id = body.patient_id if body else None
        doctor = doctor_service.view_profile(db, doctor_id, patient_id if isinstance(patient_id, str) else None)
        return create_response(
            message="Doctor profile viewed successfully",
            data=DoctorDetail.model_validate(doctor).to_payload(),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while viewing doctor profile")


@router.get("/{doctor_id}/leads")
def fetch_leads(doctor_id: str, db: Session = Depends(get_db)):
    try:
        leads = [LeadResponse.model_validate(lead).to_payload() for lead in doctor_service.list_leads(db, doctor_id)]
        return create_response(
            message="Leads fetched successfully",
            data=leads,
            count=len(leads),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred while fetching leads")
