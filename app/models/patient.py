import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.enums import PatientOnboardingStep

# Pair uniqueness comes from the composite primary key.
saved_doctors = Table(
    "saved_doctors",
    Base.metadata,
    Column("patient_id", String(36), ForeignKey("patients.id", ondelete="CASCADE"), primary_key=True),
    Column("doctor_id", String(36), ForeignKey("doctors.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=True)
    google_id = Column(String, unique=True, index=True, nullable=True)

    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    gender = Column(String(32), nullable=True)
    age = Column(Integer, nullable=True)
    city = Column(String, nullable=True)

    onboarding_step = Column(
        Enum(PatientOnboardingStep, name="patient_onboarding_step"),
        default=PatientOnboardingStep.EMAIL_VERIFIED,
        nullable=False,
    )

    otp = Column(String(6), nullable=True)
    otp_expiry = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    saved_doctors = relationship("Doctor", secondary=saved_doctors, back_populates="saved_by")
    leads = relationship("Lead", back_populates="patient", cascade="all, delete-orphan")
