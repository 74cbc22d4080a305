"""
Datastore access for doctor and patient records.

Writes report their outcome as a :class:`StoreResult` so callers branch on
``StoreStatus`` rather than on driver exceptions. Unique-key violations are
rolled back and reported as ``CONFLICT``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.doctor import Doctor
from app.models.lead import Lead
from app.models.patient import Patient, saved_doctors

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")
Account = TypeVar("Account", Doctor, Patient)


class StoreStatus(str, Enum):
    OK = "OK"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class StoreResult(Generic[RecordT]):
    status: StoreStatus
    record: Optional[RecordT] = None

    @property
    def ok(self) -> bool:
        return self.status == StoreStatus.OK


def get_by_id(db: Session, model: Type[Account], account_id: str) -> Account | None:
    return db.get(model, account_id)


def get_by_email(db: Session, model: Type[Account], email: str) -> Account | None:
    return db.query(model).filter(model.email == email).first()


def get_by_google_id(db: Session, model: Type[Account], google_id: str) -> Account | None:
    return db.query(model).filter(model.google_id == google_id).first()


def insert_record(db: Session, model: Type[RecordT], **fields) -> StoreResult[RecordT]:
    record = model(**fields)
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Insert into %s rejected by unique constraint", model.__tablename__)
        return StoreResult(StoreStatus.CONFLICT)
    db.refresh(record)
    return StoreResult(StoreStatus.OK, record)


def commit_changes(db: Session, record: RecordT) -> StoreResult[RecordT]:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return StoreResult(StoreStatus.CONFLICT)
    db.refresh(record)
    return StoreResult(StoreStatus.OK, record)


def increment_view_count(db: Session, doctor_id: str) -> StoreResult[Doctor]:
    """Add one to the stored counter as a single UPDATE."""
    result = db.execute(
        update(Doctor)
        .where(Doctor.id == doctor_id)
        .values(view_count=Doctor.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        return StoreResult(StoreStatus.NOT_FOUND)
    doctor = db.get(Doctor, doctor_id, populate_existing=True)
    return StoreResult(StoreStatus.OK, doctor)


def is_doctor_saved(db: Session, patient_id: str, doctor_id: str) -> bool:
    row = db.execute(
        select(saved_doctors.c.patient_id).where(
            saved_doctors.c.patient_id == patient_id,
            saved_doctors.c.doctor_id == doctor_id,
        )
    ).first()
    return row is not None


def add_saved_doctor(db: Session, patient_id: str, doctor_id: str) -> StoreResult[None]:
    try:
        db.execute(insert(saved_doctors).values(patient_id=patient_id, doctor_id=doctor_id))
        db.commit()
    except IntegrityError:
        db.rollback()
        return StoreResult(StoreStatus.CONFLICT)
    return StoreResult(StoreStatus.OK)


def remove_saved_doctor(db: Session, patient_id: str, doctor_id: str) -> StoreResult[None]:
    result = db.execute(
        delete(saved_doctors).where(
            saved_doctors.c.patient_id == patient_id,
            saved_doctors.c.doctor_id == doctor_id,
        )
    )
    db.commit()
    return StoreResult(StoreStatus.OK if result.rowcount else StoreStatus.NOT_FOUND)


def list_saved_doctors(db: Session, patient_id: str) -> list[Doctor]:
    return (
        db.query(Doctor)
        .join(saved_doctors, saved_doctors.c.doctor_id == Doctor.id)
        .filter(saved_doctors.c.patient_id == patient_id)
        .order_by(Doctor.created_at.asc())
        .all()
    )


def upsert_lead(db: Session, doctor_id: str, patient_id: str) -> StoreResult[Lead]:
    now = datetime.utcnow()
    lead = db.query(Lead).filter(Lead.doctor_id == doctor_id, Lead.patient_id == patient_id).first()
    if lead:
        lead.viewed_at = now
        return commit_changes(db, lead)

    result = insert_record(db, Lead, doctor_id=doctor_id, patient_id=patient_id, viewed_at=now)
    if result.status == StoreStatus.CONFLICT:
        # Another request created the lead first; refresh that one instead.
        lead = db.query(Lead).filter(Lead.doctor_id == doctor_id, Lead.patient_id == patient_id).first()
        if lead is None:
            return result
        lead.viewed_at = now
        return commit_changes(db, lead)
    return result
