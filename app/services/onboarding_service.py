import logging
from typing import Any, Callable, Sequence

from sqlalchemy.orm import Session

from app.services import account_store
from app.services.account_kinds import AccountKind
from app.services.onboarding_fsm import InvalidTransition, OnboardingAction
from app.services.validators import ValidationResult, missing_fields, run_validators
from app.utils.response import bad_request, not_found

logger = logging.getLogger(__name__)

Rule = tuple[str, Callable[[Any], ValidationResult]]


def submit_step(
    db: Session,
    kind: AccountKind,
    action: OnboardingAction,
    account_id: Any,
    payload: dict,
    rules: Sequence[Rule],
    missing_message: str,
):
    """
    Validate and store one onboarding step.

    Checks run in a fixed order: required fields, field rules, account
    lookup, then the transition table. Nothing is written unless all pass,
    and the new fields land in the same commit as the advanced step.
    """
    if account_id in (None, "") or missing_fields(payload, [field for field, _ in rules]):
        raise bad_request("MISSING_FIELDS", missing_message)

    cleaned = run_validators(payload, rules)
    if isinstance(cleaned, ValidationResult):
        raise bad_request(cleaned.error, cleaned.message)

    account = account_store.get_by_id(db, kind.model, str(account_id))
    if not account:
        raise not_found(kind.not_found_error, f"{kind.label} account not found")

    try:
        next_step = kind.flow.advance(account.onboarding_step, action)
    except InvalidTransition as exc:
        logger.info(
            "Rejected %s for %s id=%s at step %s",
            action.value,
            kind.type.value,
            account.id,
            account.onboarding_step.value,
        )
        raise bad_request("INVALID_ONBOARDING_STEP", exc.message)

    for field, value in cleaned.items():
        setattr(account, field, value)
    account.onboarding_step = next_step
    account_store.commit_changes(db, account)
    logger.info("%s id=%s completed %s -> %s", kind.label, account.id, action.value, next_step.value)
    return account
