"""Security and authentication utilities.

Teacher login is a placeholder lookup against a single configured account.
It identifies the instructor for the dashboard; it is not a security boundary.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import argon2
import jwt
from fastapi import HTTPException, Request

from attendance.core import config
from attendance.core.constants import TEACHER_TOKEN_COOKIE

ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)


@dataclass(frozen=True)
class Teacher:
    id: str
    name: str
    email: str


def get_password_hash(password: str) -> str:
    """Hash a password using Argon2."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its Argon2 hash."""
    try:
        ph.verify(password_hash, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False


def get_configured_teacher() -> Teacher:
    settings = config.settings
    return Teacher(
        id=settings.TEACHER_ID,
        name=settings.TEACHER_NAME,
        email=settings.TEACHER_EMAIL,
    )


def authenticate_teacher(email: str, password: str) -> Optional[Teacher]:
    """Look up the teacher account matching ``email`` and ``password``.

    Supports both hashed passwords (starting with $argon2) and plaintext,
    like the development default.

    Returns:
        The matching Teacher, or None when the credentials do not match
    """
    settings = config.settings
    if email.strip().lower() != settings.TEACHER_EMAIL.lower():
        return None

    stored_password = settings.TEACHER_PASSWORD
    if stored_password.startswith("$argon2"):
        matches = verify_password(password, stored_password)
    else:
        matches = password == stored_password

    return get_configured_teacher() if matches else None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)
    return encoded_jwt


def verify_teacher_token(request: Request) -> dict:
    """Verify JWT token from cookie and return payload."""
    token = request.cookies.get(TEACHER_TOKEN_COOKIE)

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
        if not payload.get("sub"):
            raise HTTPException(status_code=403, detail="Not authorized")
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
