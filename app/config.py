import os
import re
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration_seconds(value: str | None, default: int) -> int:
    """Turn values like ``7d``, ``12h``, ``30m`` or ``3600`` into seconds."""
    if not value:
        return default
    match = _DURATION_PATTERN.match(value.lower())
    if not match:
        return default
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit]


class Settings:
    PROJECT_NAME = "ECare+ Backend"

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ecare.db")
    APP_ENV = os.getenv("APP_ENV", os.getenv("NODE_ENV", "development")).lower()

    JWT_SECRET = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "7d")
    ACCESS_TOKEN_EXPIRE_SECONDS = parse_duration_seconds(JWT_EXPIRES_IN, 7 * 86400)

    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", 10))
    ALLOW_MOCK_OTP = os.getenv(
        "ALLOW_MOCK_OTP",
        "false" if APP_ENV == "production" else "true",
    ).lower() == "true"

    BREVO_API_KEY = os.getenv("BREVO_API_KEY")
    EMAIL_USER = os.getenv("EMAIL_USER", "noreply@ecareplus.com")
    EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "ECare+")

    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/")

    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
    GOOGLE_CALLBACK_URL = os.getenv("GOOGLE_CALLBACK_URL", "http://localhost:3000/auth/google/callback")

    SESSION_SECRET = os.getenv("SESSION_SECRET", "your-session-secret-change-in-production")
    PORT = int(os.getenv("PORT", 3000))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", os.getenv("FRONTEND_URL", "*")).split(",")
        if origin.strip()
    ]

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def google_configured(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)


settings = Settings()
