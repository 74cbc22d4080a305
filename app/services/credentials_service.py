"""
Email + password registration, OTP verification and login, shared by the
doctor and patient pipelines.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from fastapi import status
from sqlalchemy.orm import Session

from app.config import settings
from app.services import account_store
from app.services.account_kinds import AccountKind
from app.services.account_store import StoreStatus
from app.services.auth_service import (
    create_access_token,
    generate_otp,
    hash_password,
    otp_expiry,
    verify_password,
)
from app.services.email_services import Mailer
from app.services.onboarding_fsm import OnboardingAction
from app.services.validators import missing_fields, validate_email, validate_otp_format, validate_password
from app.utils.response import ApiError, bad_request, not_found

logger = logging.getLogger(__name__)


@dataclass
class OtpIssued:
    account: object
    otp: str
    delivered: bool


def _email_exists() -> ApiError:
    return ApiError(status.HTTP_409_CONFLICT, "EMAIL_ALREADY_EXISTS", "An account with this email already exists")


def _invalid_credentials() -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS", "Invalid email or password")


def _require_email(payload: dict, *others: str, message: str) -> str:
    if missing_fields(payload, ("email", *others)):
        raise bad_request("MISSING_FIELDS", message)
    result = validate_email(payload["email"])
    if not result.valid:
        raise bad_request(result.error, result.message)
    return result.value


def deliver_otp(mailer: Mailer, email: str, otp: str) -> bool:
    """Send the code; any transport failure is reported as ``False``."""
    try:
        return mailer.send_otp(email, otp, settings.OTP_EXPIRE_MINUTES)
    except Exception:
        logger.exception("Email send error for %s", email)
        return False


def register(db: Session, kind: AccountKind, payload: dict, mailer: Mailer) -> OtpIssued:
    email = _require_email(payload, "password", message="Email and password are required")
    password_check = validate_password(payload["password"])
    if not password_check.valid:
        raise bad_request(password_check.error, password_check.message)

    if account_store.get_by_email(db, kind.model, email):
        raise _email_exists()

    otp = generate_otp()
    result = account_store.insert_record(
        db,
        kind.model,
        email=email,
        password=hash_password(password_check.value),
        otp=otp,
        otp_expiry=otp_expiry(),
        onboarding_step=kind.initial_step,
    )
    if result.status == StoreStatus.CONFLICT:
        raise _email_exists()

    account = result.record
    logger.info("Created %s account id=%s", kind.type.value, account.id)
    # The account is committed before delivery so a mail failure never undoes it.
    delivered = deliver_otp(mailer, email, otp)
    return OtpIssued(account=account, otp=otp, delivered=delivered)


def resend_otp(db: Session, kind: AccountKind, payload: dict, mailer: Mailer) -> OtpIssued:
    email = _require_email(payload, message="Email is required")
    account = account_store.get_by_email(db, kind.model, email)
    if not account:
        raise not_found(kind.not_found_error, "Account not found. Please sign up first.")
    if not kind.flow.allows(account.onboarding_step, OnboardingAction.VERIFY_EMAIL):
        raise bad_request("INVALID_ONBOARDING_STEP", "Email is already verified")

    otp = generate_otp()
    account.otp = otp
    account.otp_expiry = otp_expiry()
    account_store.commit_changes(db, account)
    delivered = deliver_otp(mailer, email, otp)
    return OtpIssued(account=account, otp=otp, delivered=delivered)


def verify_otp(db: Session, kind: AccountKind, payload: dict) -> tuple[object, str]:
    email = _require_email(payload, "otp", message="Email and OTP are required")
    otp_check = validate_otp_format(payload["otp"])
    if not otp_check.valid:
        raise bad_request(otp_check.error, otp_check.message)

    account = account_store.get_by_email(db, kind.model, email)
    if not account:
        raise not_found(kind.not_found_error, "Account not found. Please sign up first.")
    if not account.otp:
        raise bad_request("OTP_NOT_FOUND", "No OTP found. Please request a new verification code.")
    if account.otp != otp_check.value:
        raise bad_request("INVALID_OTP", "Invalid verification code. Please check and try again.")
    if account.otp_expiry and datetime.utcnow() > account.otp_expiry:
        raise bad_request("OTP_EXPIRED", "Verification code has expired. Please request a new code.")

    account.otp = None
    account.otp_expiry = None
    # Accounts already moved past verification (e.g. through Google) keep their step.
    if kind.flow.allows(account.onboarding_step, OnboardingAction.VERIFY_EMAIL):
        account.onboarding_step = kind.flow.advance(account.onboarding_step, OnboardingAction.VERIFY_EMAIL)
    account_store.commit_changes(db, account)
    logger.info("Verified email for %s id=%s", kind.type.value, account.id)

    token = create_access_token(account.id, account.email, kind.type)
    return account, token


def login(db: Session, kind: AccountKind, payload: dict) -> tuple[object, str]:
    email = _require_email(payload, "password", message="Email and password are required")
    account = account_store.get_by_email(db, kind.model, email)
    if not account or not account.password:
        raise _invalid_credentials()
    if not verify_password(str(payload["password"]), account.password):
        raise _invalid_credentials()
    token = create_access_token(account.id, account.email, kind.type)
    return account, token
