import logging
from abc import ABC, abstractmethod

import httpx
from starlette.requests import Request

from app.config import Settings

logger = logging.getLogger(__name__)

BREVO_SEND_URL = "https://api.brevo.com/v3/smtp/email"

OTP_SUBJECT = "Your ECare+ Verification Code"

OTP_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #4CAF50;">ECare+ Verification Code</h2>
  <p>Your verification code is:</p>
  <h1 style="color: #2196F3; font-size: 32px; letter-spacing: 5px;">{{OTP}}</h1>
  <p>This code will expire in {{MINUTES}} minutes.</p>
  <p>If you didn't request this code, please ignore this email.</p>
</div>
"""


class Mailer(ABC):
    """Delivers one-time codes. ``send_otp`` returns whether the mail went out."""

    enabled = False

    @abstractmethod
    def send_otp(self, to_email: str, otp: str, expires_in_minutes: int) -> bool:
        ...

    def close(self) -> None:
        pass


class DisabledMailer(Mailer):
    def send_otp(self, to_email: str, otp: str, expires_in_minutes: int) -> bool:
        logger.warning("Email transport not configured; OTP for %s was not sent", to_email)
        return False


class BrevoMailer(Mailer):
    enabled = True

    def __init__(self, api_key: str, sender_email: str, sender_name: str, client: httpx.Client | None = None):
        self.sender = {"name": sender_name, "email": sender_email}
        self.client = client or httpx.Client(
            timeout=10,
            headers={"api-key": api_key, "accept": "application/json"},
        )

    def send_otp(self, to_email: str, otp: str, expires_in_minutes: int) -> bool:
        html = OTP_TEMPLATE.replace("{{OTP}}", otp).replace("{{MINUTES}}", str(expires_in_minutes))
        body = {
            "sender": self.sender,
            "to": [{"email": to_email}],
            "subject": OTP_SUBJECT,
            "htmlContent": html,
        }
        try:
            response = self.client.post(BREVO_SEND_URL, json=body)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Email send to %s failed: %s", to_email, exc)
            return False
        logger.info("OTP email sent to %s", to_email)
        return True

    def close(self) -> None:
        self.client.close()


def build_mailer(settings: Settings) -> Mailer:
    if not settings.BREVO_API_KEY:
        logger.warning("BREVO_API_KEY not configured. Email sending will be disabled.")
        return DisabledMailer()
    logger.info("Brevo email client initialized")
    return BrevoMailer(settings.BREVO_API_KEY, settings.EMAIL_USER, settings.EMAIL_SENDER_NAME)


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer
