"""
Field-level validation for onboarding payloads.

Every check returns a :class:`ValidationResult` holding either the normalized
value or the error code and message to report. Step handlers run the checks
in order and stop at the first failure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from app.models.enums import DayOfWeek, Gender

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_PATTERN = re.compile(r"^\d{6}$")
PHONE_PATTERN = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s.]?[(]?[0-9]{1,4}[)]?[-\s.]?[0-9]{1,9}$")
TIMING_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]-([01][0-9]|2[0-3]):[0-5][0-9]$")
UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s")

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    value: Any = None
    error: str | None = None
    message: str | None = None

    @classmethod
    def ok(cls, value: Any) -> "ValidationResult":
        return cls(True, value=value)

    @classmethod
    def fail(cls, error: str, message: str) -> "ValidationResult":
        return cls(False, error=error, message=message)


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def missing_fields(payload: dict, required: Iterable[str]) -> list[str]:
    return [field for field in required if is_missing(payload.get(field))]


def validate_email(email: Any) -> ValidationResult:
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        return ValidationResult.fail("INVALID_EMAIL", "Invalid email format")
    return ValidationResult.ok(email)


def validate_password(password: Any) -> ValidationResult:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return ValidationResult.fail("INVALID_PASSWORD", "Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        return ValidationResult.fail("INVALID_PASSWORD", "Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        return ValidationResult.fail("INVALID_PASSWORD", "Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        return ValidationResult.fail("INVALID_PASSWORD", "Password must contain at least one number")
    return ValidationResult.ok(password)


def validate_otp_format(otp: Any) -> ValidationResult:
    if not isinstance(otp, str) or not OTP_PATTERN.match(otp):
        return ValidationResult.fail("INVALID_OTP_FORMAT", "OTP must be a 6-digit number")
    return ValidationResult.ok(otp)


def validate_uuid(value: Any, error: str, label: str) -> ValidationResult:
    if not isinstance(value, str) or not UUID_PATTERN.match(value):
        return ValidationResult.fail(error, f"Invalid {label} ID format. Must be a valid UUID.")
    return ValidationResult.ok(value)


def _text(value: Any, min_length: int, error: str, label: str) -> ValidationResult:
    if not isinstance(value, str) or len(value.strip()) < min_length:
        return ValidationResult.fail(error, f"{label} must be at least {min_length} characters long")
    return ValidationResult.ok(value.strip())


def _to_int(value: Any) -> int | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    return None


def _int_in_range(value: Any, low: int, high: int, error: str, message: str) -> ValidationResult:
    number = _to_int(value)
    if number is None or not low <= number <= high:
        return ValidationResult.fail(error, message)
    return ValidationResult.ok(number)


def validate_name(name: Any) -> ValidationResult:
    return _text(name, 2, "INVALID_NAME", "Name")


def validate_doctor_age(age: Any) -> ValidationResult:
    return _int_in_range(age, 18, 100, "INVALID_AGE", "Age must be between 18 and 100")


def validate_patient_age(age: Any) -> ValidationResult:
    return _int_in_range(age, 1, 120, "INVALID_AGE", "Age must be between 1 and 120")


def validate_gender(gender: Any) -> ValidationResult:
    allowed = [member.value for member in Gender]
    if gender not in allowed:
        return ValidationResult.fail("INVALID_GENDER", f"Gender must be one of: {', '.join(allowed)}")
    return ValidationResult.ok(Gender(gender).value)


def validate_languages(languages: Any) -> ValidationResult:
    if (
        not isinstance(languages, list)
        or not languages
        or not all(isinstance(lang, str) and lang.strip() for lang in languages)
    ):
        return ValidationResult.fail("INVALID_LANGUAGES", "At least one language is required")
    return ValidationResult.ok([lang.strip() for lang in languages])


def phone_validator(error: str, label: str) -> Callable[[Any], ValidationResult]:
    def _validate(phone: Any) -> ValidationResult:
        if not isinstance(phone, str) or not PHONE_PATTERN.match(_WHITESPACE.sub("", phone)):
            return ValidationResult.fail(error, f"Invalid {label} format")
        return ValidationResult.ok(phone.strip())

    return _validate


validate_contact_number = phone_validator("INVALID_CONTACT_NUMBER", "contact number")
validate_whatsapp_number = phone_validator("INVALID_WHATSAPP_NUMBER", "WhatsApp number")
validate_phone = phone_validator("INVALID_PHONE", "phone number")


def validate_specialty(value: Any) -> ValidationResult:
    return _text(value, 2, "INVALID_SPECIALTY", "Specialty")


def validate_qualification(value: Any) -> ValidationResult:
    return _text(value, 2, "INVALID_QUALIFICATION", "Latest qualification")


def validate_years_of_experience(value: Any) -> ValidationResult:
    return _int_in_range(
        value, 0, 50, "INVALID_YEARS_OF_EXPERIENCE", "Years of experience must be between 0 and 50"
    )


def validate_address(value: Any) -> ValidationResult:
    return _text(value, 5, "INVALID_ADDRESS", "Address")


def validate_city(value: Any) -> ValidationResult:
    return _text(value, 2, "INVALID_CITY", "City")


def validate_locality(value: Any) -> ValidationResult:
    return _text(value, 2, "INVALID_LOCALITY", "Locality")


def validate_available_days(days: Any) -> ValidationResult:
    if not isinstance(days, list) or not days:
        return ValidationResult.fail("INVALID_AVAILABLE_DAYS", "At least one available day is required")
    allowed = [member.value for member in DayOfWeek]
    for day in days:
        if day not in allowed:
            return ValidationResult.fail("INVALID_DAY", f"Invalid day: {day}. Must be one of: {', '.join(allowed)}")
    return ValidationResult.ok(list(days))


def validate_timing(timing: Any) -> ValidationResult:
    if not isinstance(timing, str) or not TIMING_PATTERN.match(timing.strip()):
        return ValidationResult.fail(
            "INVALID_TIMING", "Invalid timing format. Use format: HH:MM-HH:MM (e.g., 09:00-17:00)"
        )
    return ValidationResult.ok(timing.strip())


def run_validators(payload: dict, rules: Iterable[tuple[str, Callable[[Any], ValidationResult]]]) -> dict | ValidationResult:
    """Apply ``rules`` in order; return the normalized values or the first failure."""
    cleaned = {}
    for field, validator in rules:
        result = validator(payload.get(field))
        if not result.valid:
            return result
        cleaned[field] = result.value
    return cleaned
