import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.enums import OnboardingStep


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=True)
    google_id = Column(String, unique=True, index=True, nullable=True)

    # Personal info
    name = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(32), nullable=True)
    languages = Column(JSON, nullable=True)
    contact_number = Column(String, nullable=True)
    whatsapp_number = Column(String, nullable=True)

    # Professional info
    specialty = Column(String, nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    latest_qualification = Column(String, nullable=True)

    # Availability
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    locality = Column(String, nullable=True)
    available_days = Column(JSON, nullable=True)
    available_timing = Column(String(11), nullable=True)

    view_count = Column(Integer, default=0, nullable=False)
    onboarding_step = Column(
        Enum(OnboardingStep, name="onboarding_step"),
        default=OnboardingStep.EMAIL_VERIFIED,
        nullable=False,
    )

    # OTP stored temporarily
    otp = Column(String(6), nullable=True)
    otp_expiry = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    saved_by = relationship("Patient", secondary="saved_doctors", back_populates="saved_doctors")
    leads = relationship("Lead", back_populates="doctor", cascade="all, delete-orphan")
