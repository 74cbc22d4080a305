from dataclasses import dataclass

from app.models.doctor import Doctor
from app.models.enums import AccountType
from app.models.patient import Patient
from app.services.onboarding_fsm import DOCTOR_FLOW, PATIENT_FLOW, OnboardingAction, OnboardingFlow


@dataclass(frozen=True)
class AccountKind:
    """Everything the shared credential and OAuth flows need to know about a variant."""

    type: AccountType
    model: type
    flow: OnboardingFlow
    label: str
    not_found_error: str

    @property
    def id_key(self) -> str:
        return f"{self.type.value}Id"

    @property
    def initial_step(self):
        return self.flow.required_step(OnboardingAction.VERIFY_EMAIL)

    @property
    def verified_step(self):
        return self.flow.required_step(OnboardingAction.PERSONAL_INFO)


DOCTOR = AccountKind(
    type=AccountType.doctor,
    model=Doctor,
    flow=DOCTOR_FLOW,
    label="Doctor",
    not_found_error="DOCTOR_NOT_FOUND",
)

PATIENT = AccountKind(
    type=AccountType.patient,
    model=Patient,
    flow=PATIENT_FLOW,
    label="Patient",
    not_found_error="PATIENT_NOT_FOUND",
)

KINDS = {kind.type: kind for kind in (DOCTOR, PATIENT)}
