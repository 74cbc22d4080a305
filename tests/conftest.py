import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_DB_PATH = BASE_DIR / "test.db"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ALLOW_MOCK_OTP", "true")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")
os.environ.pop("BREVO_API_KEY", None)
os.environ.pop("GOOGLE_CLIENT_ID", None)
os.environ.pop("GOOGLE_CLIENT_SECRET", None)

import app.main as main  # noqa: E402  (import after env vars are set)
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.services.email_services import Mailer  # noqa: E402
from app.services.google_auth_service import GoogleIdentity, IdentityProviderUnavailable  # noqa: E402

STRONG_PASSWORD = "Passw0rdX"


class RecordingMailer(Mailer):
    """Keeps every code it is asked to send; ``deliver`` toggles success."""

    def __init__(self, deliver: bool = True):
        self.deliver = deliver
        self.sent = []

    @property
    def enabled(self):
        return self.deliver

    def send_otp(self, to_email, otp, expires_in_minutes):
        self.sent.append((to_email, otp))
        return self.deliver

    def last_otp_for(self, email):
        for to_email, otp in reversed(self.sent):
            if to_email == email:
                return otp
        return None


class FakeIdentityProvider:
    """Maps access tokens to identities; unknown tokens are rejected."""

    enabled = False

    def __init__(self):
        self.identities = {}

    async def authorize_redirect(self, request):
        raise IdentityProviderUnavailable("Google OAuth is not configured")

    async def identity_from_callback(self, request):
        raise IdentityProviderUnavailable("Google OAuth is not configured")

    async def identity_from_access_token(self, access_token):
        return self.identities.get(access_token)

    def register(self, token, google_id, email, name=None):
        self.identities[token] = GoogleIdentity(google_id=google_id, email=email, name=name)

    async def aclose(self):
        return None


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture()
def client(monkeypatch, mailer, identity_provider):
    """Provide a TestClient whose startup wires the fake collaborators."""
    monkeypatch.setattr(main, "build_mailer", lambda settings: mailer)
    monkeypatch.setattr(main, "build_identity_provider", lambda settings: identity_provider)

    with TestClient(main.app) as test_client:
        yield test_client


def register_and_verify(client, mailer, kind, email, password=STRONG_PASSWORD):
    """Create an account through the HTTP flow and return ``(account_id, token)``."""
    response = client.post(f"/{kind}s/onboarding/auth", json={"email": email, "password": password})
    assert response.status_code == 201, response.json()
    otp = mailer.last_otp_for(email)
    response = client.post(f"/{kind}s/onboarding/verify-otp", json={"email": email, "otp": otp})
    assert response.status_code == 200, response.json()
    data = response.json()["data"]
    return data[f"{kind}Id"], data["token"]


DOCTOR_PERSONAL = {
    "name": "Dr. Asha Rao",
    "age": 42,
    "gender": "FEMALE",
    "languages": ["English", "Hindi"],
    "contactNumber": "+91 98765 43210",
    "whatsappNumber": "+919876543210",
}

DOCTOR_PROFESSIONAL = {
    "specialty": "Cardiology",
    "yearsOfExperience": 15,
    "latestQualification": "MD Cardiology",
}

DOCTOR_AVAILABILITY = {
    "address": "12 Residency Road",
    "city": "Bengaluru",
    "locality": "Richmond Town",
    "availableDays": ["MONDAY", "WEDNESDAY", "FRIDAY"],
    "availableTiming": "09:00-17:00",
}

PATIENT_PERSONAL = {
    "name": "Ravi Kumar",
    "phone": "+919812345678",
    "gender": "MALE",
    "age": 35,
    "city": "Mumbai",
}


def complete_doctor(client, mailer, email="doctor@example.com"):
    doctor_id, token = register_and_verify(client, mailer, "doctor", email)
    for path, body in (
        ("personal-info", DOCTOR_PERSONAL),
        ("professional-info", DOCTOR_PROFESSIONAL),
        ("availability", DOCTOR_AVAILABILITY),
    ):
        response = client.post(f"/doctors/onboarding/{path}", json={"doctorId": doctor_id, **body})
        assert response.status_code == 200, response.json()
    return doctor_id, token


def complete_patient(client, mailer, email="patient@example.com"):
    patient_id, token = register_and_verify(client, mailer, "patient", email)
    response = client.post(
        "/patients/onboarding/personal-info", json={"patientId": patient_id, **PATIENT_PERSONAL}
    )
    assert response.status_code == 200, response.json()
    return patient_id, token
