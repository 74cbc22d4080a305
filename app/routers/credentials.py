"""Response builders shared by the doctor and patient credential endpoints."""

from fastapi import status

from app.config import settings
from app.services.account_kinds import AccountKind
from app.services.credentials_service import OtpIssued
from app.utils.response import create_response

MAIL_WARNING = "Email service is not configured properly. Please set up BREVO_API_KEY environment variable."


def otp_issued_response(kind: AccountKind, issued: OtpIssued, *, resend: bool = False):
    data = {kind.id_key: issued.account.id}

    if issued.delivered:
        if resend:
            return create_response("Verification code resent to your email.", data, status.HTTP_200_OK)
        return create_response(
            "Account created successfully. Verification code sent to your email.",
            data,
            status.HTTP_201_CREATED,
        )

    if settings.ALLOW_MOCK_OTP:
        data["mockOtp"] = issued.otp
        message = "OTP regenerated (email failed)" if resend else "Account created. OTP generated (email failed)"
        return create_response(message, data, status.HTTP_200_OK, warning=MAIL_WARNING)

    return create_response(
        "Failed to send verification email. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="EMAIL_SEND_FAILED",
    )


def verified_response(kind: AccountKind, account, token: str):
    return create_response(
        "Email verified successfully. You can now proceed with onboarding.",
        {
            kind.id_key: account.id,
            "token": token,
            "onboardingStep": account.onboarding_step,
        },
        status.HTTP_200_OK,
    )


def login_response(kind: AccountKind, account, token: str):
    return create_response(
        "Login successful",
        {
            kind.id_key: account.id,
            "token": token,
            "email": account.email,
            "name": account.name,
            "onboardingStep": account.onboarding_step,
        },
        status.HTTP_200_OK,
    )
