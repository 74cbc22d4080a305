from datetime import datetime
from typing import Any

from app.models.enums import OnboardingStep
from app.schemas.common import CamelModel


# Request bodies keep loose types; the onboarding validators own the error codes.
class DoctorPersonalInfo(CamelModel):
    doctor_id: Any = None
    name: Any = None
    age: Any = None
    gender: Any = None
    languages: Any = None
    contact_number: Any = None
    whatsapp_number: Any = None


class DoctorProfessionalInfo(CamelModel):
    doctor_id: Any = None
    specialty: Any = None
    years_of_experience: Any = None
    latest_qualification: Any = None


class DoctorAvailability(CamelModel):
    doctor_id: Any = None
    address: Any = None
    city: Any = None
    locality: Any = None
    available_days: Any = None
    available_timing: Any = None


class ProfileView(CamelModel):
    patient_id: Any = None


class DoctorSummary(CamelModel):
    id: str
    email: str
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    specialty: str | None = None
    city: str | None = None
    locality: str | None = None
    view_count: int = 0
    onboarding_step: OnboardingStep
    created_at: datetime


class SavedDoctorSummary(CamelModel):
    id: str
    email: str
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    specialty: str | None = None
    city: str | None = None
    locality: str | None = None
    years_of_experience: int | None = None
    view_count: int = 0
    created_at: datetime


class DoctorDetail(DoctorSummary):
    languages: list[str] | None = None
    contact_number: str | None = None
    whatsapp_number: str | None = None
    years_of_experience: int | None = None
    latest_qualification: str | None = None
    address: str | None = None
    available_days: list[str] | None = None
    available_timing: str | None = None
    updated_at: datetime


class LeadResponse(CamelModel):
    id: str
    doctor_id: str
    patient_id: str
    viewed_at: datetime
    created_at: datetime
