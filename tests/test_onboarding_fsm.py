from types import SimpleNamespace

import pytest

from app.models.enums import OnboardingStep, PatientOnboardingStep
from app.services.onboarding_fsm import DOCTOR_FLOW, PATIENT_FLOW, InvalidTransition, OnboardingAction


def test_doctor_flow_walks_every_step_in_order():
    step = OnboardingStep.EMAIL_VERIFIED
    for action in (
        OnboardingAction.VERIFY_EMAIL,
        OnboardingAction.PERSONAL_INFO,
        OnboardingAction.PROFESSIONAL_INFO,
        OnboardingAction.AVAILABILITY,
    ):
        step = DOCTOR_FLOW.advance(step, action)

    assert step == OnboardingStep.COMPLETE


@pytest.mark.parametrize(
    "current, action, message",
    [
        (OnboardingStep.EMAIL_VERIFIED, OnboardingAction.PERSONAL_INFO, "Please complete email verification first"),
        (
            OnboardingStep.PERSONAL_INFO_COMPLETE,
            OnboardingAction.AVAILABILITY,
            "Please complete professional information first",
        ),
        (OnboardingStep.COMPLETE, OnboardingAction.PROFESSIONAL_INFO, "Please complete personal information first"),
    ],
)
def test_doctor_flow_rejects_out_of_order_actions(current, action, message):
    with pytest.raises(InvalidTransition) as exc_info:
        DOCTOR_FLOW.advance(current, action)

    assert exc_info.value.message == message
    assert exc_info.value.current == current


def test_completed_doctor_cannot_resubmit_personal_info():
    assert not DOCTOR_FLOW.allows(OnboardingStep.COMPLETE, OnboardingAction.PERSONAL_INFO)


def test_patient_personal_info_keeps_marker():
    step = PATIENT_FLOW.advance(PatientOnboardingStep.PERSONAL_INFO_COMPLETE, OnboardingAction.PERSONAL_INFO)

    assert step == PatientOnboardingStep.PERSONAL_INFO_COMPLETE


def test_patient_flow_has_no_professional_step():
    assert not PATIENT_FLOW.allows(PatientOnboardingStep.PERSONAL_INFO_COMPLETE, OnboardingAction.PROFESSIONAL_INFO)


def test_completion_rules():
    assert DOCTOR_FLOW.is_complete(SimpleNamespace(onboarding_step=OnboardingStep.COMPLETE))
    assert not DOCTOR_FLOW.is_complete(SimpleNamespace(onboarding_step=OnboardingStep.AVAILABILITY_COMPLETE))

    assert PATIENT_FLOW.is_complete(SimpleNamespace(name="Ravi", phone="+911234567", city="Pune"))
    assert not PATIENT_FLOW.is_complete(SimpleNamespace(name="Ravi", phone=None, city="Pune"))
