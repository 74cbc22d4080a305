from datetime import datetime
from typing import Any

from app.models.enums import PatientOnboardingStep
from app.schemas.common import CamelModel


class PatientPersonalInfo(CamelModel):
    patient_id: Any = None
    name: Any = None
    phone: Any = None
    gender: Any = None
    age: Any = None
    city: Any = None


class SavedDoctorRequest(CamelModel):
    patient_id: Any = None
    doctor_id: Any = None


class PatientSummary(CamelModel):
    id: str
    email: str
    name: str | None = None
    phone: str | None = None
    gender: str | None = None
    age: int | None = None
    city: str | None = None
    onboarding_step: PatientOnboardingStep
    created_at: datetime


class PatientDetail(PatientSummary):
    updated_at: datetime
