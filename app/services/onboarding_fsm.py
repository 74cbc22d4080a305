"""
Onboarding state machine for doctor and patient accounts.

The step marker names the step an account is ready for. Each submission
endpoint maps to an :class:`OnboardingAction`; the flow's transition table
decides whether the action is allowed from the current step and which step
follows.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Generic, Mapping, TypeVar

from app.models.enums import OnboardingStep, PatientOnboardingStep

StepT = TypeVar("StepT", OnboardingStep, PatientOnboardingStep)


class OnboardingAction(str, Enum):
    VERIFY_EMAIL = "VERIFY_EMAIL"
    PERSONAL_INFO = "PERSONAL_INFO"
    PROFESSIONAL_INFO = "PROFESSIONAL_INFO"
    AVAILABILITY = "AVAILABILITY"


class InvalidTransition(Exception):
    def __init__(self, current, action: OnboardingAction, message: str):
        super().__init__(message)
        self.current = current
        self.action = action
        self.message = message


class OnboardingFlow(Generic[StepT]):
    def __init__(
        self,
        name: str,
        transitions: Mapping[OnboardingAction, tuple[StepT, StepT]],
        completion: Callable[[object], bool],
        messages: Mapping[OnboardingAction, str],
    ):
        self.name = name
        self._transitions = dict(transitions)
        self._completion = completion
        self._messages = dict(messages)

    def required_step(self, action: OnboardingAction) -> StepT:
        return self._transitions[action][0]

    def allows(self, current: StepT, action: OnboardingAction) -> bool:
        transition = self._transitions.get(action)
        return transition is not None and transition[0] == current

    def advance(self, current: StepT, action: OnboardingAction) -> StepT:
        if not self.allows(current, action):
            message = self._messages.get(action, "Onboarding step is not available")
            raise InvalidTransition(current, action, message)
        return self._transitions[action][1]

    def is_complete(self, account) -> bool:
        return self._completion(account)


DOCTOR_FLOW: OnboardingFlow[OnboardingStep] = OnboardingFlow(
    "doctor",
    transitions={
        OnboardingAction.VERIFY_EMAIL: (OnboardingStep.EMAIL_VERIFIED, OnboardingStep.PERSONAL_INFO_COMPLETE),
        OnboardingAction.PERSONAL_INFO: (
            OnboardingStep.PERSONAL_INFO_COMPLETE,
            OnboardingStep.PROFESSIONAL_INFO_COMPLETE,
        ),
        OnboardingAction.PROFESSIONAL_INFO: (
            OnboardingStep.PROFESSIONAL_INFO_COMPLETE,
            OnboardingStep.AVAILABILITY_COMPLETE,
        ),
        OnboardingAction.AVAILABILITY: (OnboardingStep.AVAILABILITY_COMPLETE, OnboardingStep.COMPLETE),
    },
    completion=lambda doctor: doctor.onboarding_step == OnboardingStep.COMPLETE,
    messages={
        OnboardingAction.VERIFY_EMAIL: "Email is already verified",
        OnboardingAction.PERSONAL_INFO: "Please complete email verification first",
        OnboardingAction.PROFESSIONAL_INFO: "Please complete personal information first",
        OnboardingAction.AVAILABILITY: "Please complete professional information first",
    },
)

PATIENT_FLOW: OnboardingFlow[PatientOnboardingStep] = OnboardingFlow(
    "patient",
    transitions={
        OnboardingAction.VERIFY_EMAIL: (
            PatientOnboardingStep.EMAIL_VERIFIED,
            PatientOnboardingStep.PERSONAL_INFO_COMPLETE,
        ),
        # Personal info is the last patient step; the marker has nowhere further to go.
        OnboardingAction.PERSONAL_INFO: (
            PatientOnboardingStep.PERSONAL_INFO_COMPLETE,
            PatientOnboardingStep.PERSONAL_INFO_COMPLETE,
        ),
    },
    completion=lambda patient: bool(patient.name and patient.phone and patient.city),
    messages={
        OnboardingAction.VERIFY_EMAIL: "Email is already verified",
        OnboardingAction.PERSONAL_INFO: "Please complete email verification first",
    },
)
