import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.enums import AccountType
from app.schemas.auth import GoogleVerifyRequest
from app.services.account_kinds import KINDS
from app.services.google_auth_service import (
    GoogleIdentityProvider,
    IdentityProviderUnavailable,
    get_identity_provider,
)
from app.services.oauth_service import GoogleAuthResult, ReconciliationError, reconcile_google_identity
from app.services.validators import missing_fields
from app.utils.response import ApiError, bad_request, create_response, handle_exception

router = APIRouter(prefix="/auth/google", tags=["Google Auth"])
logger = logging.getLogger(__name__)

SESSION_USER_TYPE = "user_type"


def _error_redirect(message: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.FRONTEND_URL}/auth/error?{urlencode({'message': message})}")


def _success_redirect(result: GoogleAuthResult, user_type: AccountType) -> RedirectResponse:
    query = urlencode(
        {
            "token": result.token,
            "userType": user_type.value,
            "redirectTo": result.redirect_to,
            "isNewUser": str(result.is_new_user).lower(),
            "isReturningIncompleteUser": str(result.is_returning_incomplete_user).lower(),
        }
    )
    return RedirectResponse(f"{settings.FRONTEND_URL}/callback?{query}")


async def _start(request: Request, provider: GoogleIdentityProvider, user_type: AccountType):
    request.session[SESSION_USER_TYPE] = user_type.value
    try:
        return await provider.authorize_redirect(request)
    except IdentityProviderUnavailable as exc:
        return _error_redirect(str(exc))


@router.get("/doctor")
async def google_login_doctor(request: Request, provider: GoogleIdentityProvider = Depends(get_identity_provider)):
    return await _start(request, provider, AccountType.doctor)


@router.get("/patient")
async def google_login_patient(request: Request, provider: GoogleIdentityProvider = Depends(get_identity_provider)):
    return await _start(request, provider, AccountType.patient)


@router.get("/callback")
async def google_callback(
    request: Request,
    db: Session = Depends(get_db),
    provider: GoogleIdentityProvider = Depends(get_identity_provider),
):
    try:
        identity = await provider.identity_from_callback(request)
        if not identity.email:
            return _error_redirect("No email found in Google profile")

        raw_type = request.session.pop(SESSION_USER_TYPE, AccountType.patient.value)
        if raw_type not in KINDS:
            return _error_redirect("Invalid user type")
        user_type = AccountType(raw_type)

        result = await run_in_threadpool(
            reconcile_google_identity, db, KINDS[user_type], identity.google_id, identity.email, identity.name
        )
        return _success_redirect(result, user_type)
    except IdentityProviderUnavailable as exc:
        return _error_redirect(str(exc))
    except Exception:
        logger.exception("Google callback error")
        return _error_redirect("Authentication failed")


@router.post("/verify")
async def google_verify(
    body: GoogleVerifyRequest,
    db: Session = Depends(get_db),
    provider: GoogleIdentityProvider = Depends(get_identity_provider),
):
    try:
        payload = body.model_dump()
        if missing_fields(payload, ("google_token", "user_type")):
            raise bad_request("MISSING_FIELDS", "Google token and user type are required")
        if not isinstance(payload["user_type"], str) or payload["user_type"] not in KINDS:
            raise bad_request("INVALID_USER_TYPE", 'User type must be either "doctor" or "patient"')
        user_type = AccountType(payload["user_type"])

        identity = await provider.identity_from_access_token(str(payload["google_token"]))
        if identity is None:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "INVALID_GOOGLE_TOKEN", "Invalid Google token")
        if not identity.email:
            raise bad_request("NO_EMAIL_IN_PROFILE", "No email found in Google profile")

        try:
            result = await run_in_threadpool(
                reconcile_google_identity, db, KINDS[user_type], identity.google_id, identity.email, identity.name
            )
        except ReconciliationError as exc:
            return create_response(
                "An error occurred during Google authentication",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                error="GOOGLE_AUTH_ERROR",
                details=str(exc) if settings.is_development else None,
            )

        account = result.account
        return create_response(
            message=result.message,
            data={
                "userId": account.id,
                "token": result.token,
                "email": account.email,
                "name": account.name,
                "userType": user_type.value,
                "isNewUser": result.is_new_user,
                "isReturningIncompleteUser": result.is_returning_incomplete_user,
                "redirectTo": result.redirect_to,
                "onboardingStep": account.onboarding_step,
            },
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "An error occurred during Google authentication")
