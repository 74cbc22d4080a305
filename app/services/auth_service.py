import secrets
from datetime import datetime, timedelta

import bcrypt
from jose import jwt

from app.config import settings
from app.models.enums import AccountType

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def generate_otp() -> str:
    return str(100000 + secrets.randbelow(900000))


def otp_expiry(now: datetime | None = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)


def create_access_token(account_id: str, email: str, account_type: AccountType) -> str:
    account_type = AccountType(account_type)
    payload = {
        f"{account_type.value}Id": account_id,
        "email": email,
        "type": account_type.value,
        "exp": datetime.utcnow() + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
