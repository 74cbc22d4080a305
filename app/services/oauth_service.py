"""
Resolve a verified Google identity to exactly one doctor or patient account.

Lookup order is Google id, then email, then creation. Uniqueness of email and
Google id in the datastore keeps repeated calls from creating duplicates: an
insert that loses a race is resolved again against the winner.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.services import account_store
from app.services.account_kinds import AccountKind
from app.services.account_store import StoreStatus
from app.services.auth_service import create_access_token

logger = logging.getLogger(__name__)

DASHBOARD = "/dashboard"
ONBOARDING = "/onboarding"


class ReconciliationError(Exception):
    pass


@dataclass
class GoogleAuthResult:
    account: object
    token: str
    is_new_user: bool
    is_returning_incomplete_user: bool
    redirect_to: str

    @property
    def message(self) -> str:
        if self.is_new_user:
            return "Account created successfully with Google"
        if self.is_returning_incomplete_user:
            return "Welcome back! Please complete your profile"
        return "Login successful"


def _result(kind: AccountKind, account, is_new: bool, is_returning_incomplete: bool, redirect_to: str):
    token = create_access_token(account.id, account.email, kind.type)
    return GoogleAuthResult(account, token, is_new, is_returning_incomplete, redirect_to)


def _link_existing(db: Session, kind: AccountKind, account, google_id: str, name: str | None) -> GoogleAuthResult:
    if kind.flow.is_complete(account):
        account.google_id = google_id
        stored = account_store.commit_changes(db, account)
        if not stored.ok:
            raise ReconciliationError("Google account is already linked to another user")
        logger.info("Linked Google id to complete %s id=%s", kind.type.value, account.id)
        return _result(kind, account, False, False, DASHBOARD)

    previous_step = account.onboarding_step
    account.google_id = google_id
    account.name = name or account.name
    # Re-opens onboarding at the first profile step even if the account had progressed further.
    account.onboarding_step = kind.verified_step
    stored = account_store.commit_changes(db, account)
    if not stored.ok:
        raise ReconciliationError("Google account is already linked to another user")
    if previous_step not in (kind.initial_step, kind.verified_step):
        logger.warning(
            "Google sign-in reset %s id=%s from %s to %s",
            kind.type.value,
            account.id,
            previous_step.value,
            kind.verified_step.value,
        )
    return _result(kind, account, False, True, ONBOARDING)


def _resolve(db: Session, kind: AccountKind, google_id: str, email: str, name: str | None):
    account = account_store.get_by_google_id(db, kind.model, google_id)
    if account:
        complete = kind.flow.is_complete(account)
        return _result(kind, account, False, False, DASHBOARD if complete else ONBOARDING)

    account = account_store.get_by_email(db, kind.model, email)
    if account:
        return _link_existing(db, kind, account, google_id, name)

    created = account_store.insert_record(
        db,
        kind.model,
        email=email,
        google_id=google_id,
        name=name,
        onboarding_step=kind.verified_step,
    )
    if created.status == StoreStatus.CONFLICT:
        return None
    logger.info("Created %s id=%s from Google sign-in", kind.type.value, created.record.id)
    return _result(kind, created.record, True, False, ONBOARDING)


def reconcile_google_identity(
    db: Session, kind: AccountKind, google_id: str, email: str, name: str | None
) -> GoogleAuthResult:
    result = _resolve(db, kind, google_id, email, name)
    if result is None:
        # A concurrent request created the account; the second pass finds it.
        result = _resolve(db, kind, google_id, email, name)
    if result is None:
        raise ReconciliationError("Could not create account for Google identity")
    return result
