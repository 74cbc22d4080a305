from enum import Enum


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class OnboardingStep(str, Enum):
    EMAIL_VERIFIED = "EMAIL_VERIFIED"
    PERSONAL_INFO_COMPLETE = "PERSONAL_INFO_COMPLETE"
    PROFESSIONAL_INFO_COMPLETE = "PROFESSIONAL_INFO_COMPLETE"
    AVAILABILITY_COMPLETE = "AVAILABILITY_COMPLETE"
    COMPLETE = "COMPLETE"


class PatientOnboardingStep(str, Enum):
    EMAIL_VERIFIED = "EMAIL_VERIFIED"
    PERSONAL_INFO_COMPLETE = "PERSONAL_INFO_COMPLETE"


class AccountType(str, Enum):
    doctor = "doctor"
    patient = "patient"
