from urllib.parse import parse_qs, urlparse

import pytest
from conftest import STRONG_PASSWORD, complete_doctor, complete_patient, register_and_verify

from app.models.doctor import Doctor
from app.models.enums import OnboardingStep, PatientOnboardingStep
from app.models.patient import Patient
from app.services.account_kinds import DOCTOR, PATIENT
from app.services.auth_service import decode_access_token
from app.services.oauth_service import DASHBOARD, ONBOARDING, reconcile_google_identity


def test_new_google_user_is_created_at_personal_info(db_session):
    result = reconcile_google_identity(db_session, DOCTOR, "g-1", "fresh@example.com", "Dr. Fresh")

    assert result.is_new_user is True
    assert result.is_returning_incomplete_user is False
    assert result.redirect_to == ONBOARDING
    assert result.message == "Account created successfully with Google"
    doctor = result.account
    assert doctor.google_id == "g-1"
    assert doctor.password is None
    assert doctor.onboarding_step == OnboardingStep.PERSONAL_INFO_COMPLETE
    assert decode_access_token(result.token)["doctorId"] == doctor.id


def test_reconcile_is_idempotent(db_session):
    first = reconcile_google_identity(db_session, PATIENT, "g-2", "same@example.com", "Same")
    second = reconcile_google_identity(db_session, PATIENT, "g-2", "same@example.com", "Same")

    assert second.account.id == first.account.id
    assert second.is_new_user is False
    assert second.is_returning_incomplete_user is False
    assert second.redirect_to == ONBOARDING
    assert db_session.query(Patient).count() == 1


def test_insert_conflict_resolves_to_existing_account(db_session, monkeypatch):
    from app.services import oauth_service

    existing = reconcile_google_identity(db_session, DOCTOR, "g-race", "race@example.com", "Racer").account
    real_get = oauth_service.account_store.get_by_google_id
    calls = {"n": 0}

    def miss_first_lookup(db, model, google_id):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_get(db, model, google_id)

    monkeypatch.setattr(oauth_service.account_store, "get_by_google_id", miss_first_lookup)
    monkeypatch.setattr(oauth_service.account_store, "get_by_email", lambda db, model, email: None)

    result = reconcile_google_identity(db_session, DOCTOR, "g-race", "race@example.com", "Racer")

    assert result.account.id == existing.id
    assert result.is_new_user is False
    assert db_session.query(Doctor).count() == 1


def test_complete_account_is_linked_without_touching_profile(client, mailer, db_session):
    doctor_id, _ = complete_doctor(client, mailer, "linked@example.com")

    result = reconcile_google_identity(db_session, DOCTOR, "g-3", "linked@example.com", "Other Name")

    assert result.account.id == doctor_id
    assert result.redirect_to == DASHBOARD
    assert result.is_new_user is False
    assert result.is_returning_incomplete_user is False
    assert result.message == "Login successful"
    assert result.account.google_id == "g-3"
    assert result.account.name == "Dr. Asha Rao"
    assert result.account.onboarding_step == OnboardingStep.COMPLETE


def test_incomplete_account_is_reset_to_personal_info(client, mailer, db_session, caplog):
    doctor_id, _ = register_and_verify(client, mailer, "doctor", "halfway@example.com")
    doctor = db_session.get(Doctor, doctor_id)
    doctor.onboarding_step = OnboardingStep.AVAILABILITY_COMPLETE
    doctor.name = "Dr. Halfway"
    db_session.commit()

    with caplog.at_level("WARNING", logger="app.services.oauth_service"):
        result = reconcile_google_identity(db_session, DOCTOR, "g-4", "halfway@example.com", "")

    assert result.is_returning_incomplete_user is True
    assert result.redirect_to == ONBOARDING
    assert result.message == "Welcome back! Please complete your profile"
    assert result.account.onboarding_step == OnboardingStep.PERSONAL_INFO_COMPLETE
    assert result.account.name == "Dr. Halfway"
    assert any("reset" in record.getMessage() for record in caplog.records)


def test_unverified_patient_is_moved_past_verification(client, db_session):
    client.post("/patients/onboarding/auth", json={"email": "pending@example.com", "password": STRONG_PASSWORD})

    result = reconcile_google_identity(db_session, PATIENT, "g-5", "pending@example.com", "Pending Person")

    assert result.is_returning_incomplete_user is True
    assert result.account.onboarding_step == PatientOnboardingStep.PERSONAL_INFO_COMPLETE
    assert result.account.name == "Pending Person"


def test_complete_patient_goes_to_dashboard(client, mailer, db_session):
    patient_id, _ = complete_patient(client, mailer, "ready@example.com")

    result = reconcile_google_identity(db_session, PATIENT, "g-6", "ready@example.com", "Ready")

    assert result.account.id == patient_id
    assert result.redirect_to == DASHBOARD


def test_verify_endpoint_creates_account(client, identity_provider):
    identity_provider.register("token-ok", "g-7", "verify@example.com", "Verified Doctor")

    response = client.post("/auth/google/verify", json={"googleToken": "token-ok", "userType": "doctor"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "verify@example.com"
    assert data["name"] == "Verified Doctor"
    assert data["userType"] == "doctor"
    assert data["isNewUser"] is True
    assert data["isReturningIncompleteUser"] is False
    assert data["redirectTo"] == ONBOARDING
    assert data["onboardingStep"] == "PERSONAL_INFO_COMPLETE"
    assert decode_access_token(data["token"])["doctorId"] == data["userId"]

    repeat = client.post("/auth/google/verify", json={"googleToken": "token-ok", "userType": "doctor"})
    assert repeat.json()["data"]["userId"] == data["userId"]
    assert repeat.json()["data"]["isNewUser"] is False


@pytest.mark.parametrize(
    "body, status_code, error",
    [
        ({"userType": "doctor"}, 400, "MISSING_FIELDS"),
        ({"googleToken": "token-ok", "userType": "admin"}, 400, "INVALID_USER_TYPE"),
        ({"googleToken": "unknown", "userType": "patient"}, 401, "INVALID_GOOGLE_TOKEN"),
        ({"googleToken": "token-no-email", "userType": "patient"}, 400, "NO_EMAIL_IN_PROFILE"),
    ],
)
def test_verify_endpoint_errors(client, identity_provider, body, status_code, error):
    identity_provider.register("token-ok", "g-8", "someone@example.com")
    identity_provider.register("token-no-email", "g-9", None)

    response = client.post("/auth/google/verify", json=body)

    assert response.status_code == status_code
    assert response.json()["error"] == error


def test_redirect_start_without_credentials_goes_to_error_page(client):
    response = client.get("/auth/google/doctor", follow_redirects=False)

    assert response.status_code in (302, 307)
    location = urlparse(response.headers["location"])
    assert location.path == "/auth/error"
    assert parse_qs(location.query)["message"] == ["Google OAuth is not configured"]


def test_verify_reconciles_off_the_event_loop(client, identity_provider, monkeypatch):
    import asyncio

    from app.routers import google_auth

    identity_provider.register("token-thread", "g-10", "thread@example.com", "Threaded")
    seen = {}

    def reconcile_and_record(*args):
        try:
            asyncio.get_running_loop()
            seen["on_loop"] = True
        except RuntimeError:
            seen["on_loop"] = False
        return reconcile_google_identity(*args)

    monkeypatch.setattr(google_auth, "reconcile_google_identity", reconcile_and_record)

    response = client.post("/auth/google/verify", json={"googleToken": "token-thread", "userType": "patient"})

    assert response.status_code == 200
    assert seen == {"on_loop": False}
