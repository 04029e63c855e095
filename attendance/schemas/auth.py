"""Authentication schemas."""
from pydantic import BaseModel, Field, field_validator

from attendance.core.sanitization import MAX_EMAIL_LENGTH


class TeacherLoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=MAX_EMAIL_LENGTH)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TeacherProfile(BaseModel):
    id: str
    name: str
    email: str


class TeacherLoginResponse(BaseModel):
    success: bool = True
    message: str
    teacher: TeacherProfile
