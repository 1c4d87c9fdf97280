# tcommerce/schemas/user.py
import re
import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# At least one lower, one upper, one digit and one special character
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")
PHONE_PATTERN = re.compile(r"^[+]?[1-9]\d{1,14}$")


class UserRegister(SQLModel):
    """
    Payload for account registration.

    Validation rules:
      - first_name 2-50 chars, last_name up to 50
      - email must be a valid EmailStr
      - password 8-128 chars with lower, upper, digit and one of @$!%*?&
      - phone (optional) digits with optional leading '+'
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(min_length=2, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    phone: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase "
                "letter, one number, and one special character"
            )
        return v

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if not PHONE_PATTERN.match(v):
            raise ValueError("Please provide a valid phone number")
        return v


class UserLogin(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserRead(SQLModel):
    """Response schema returned to clients (never includes the hash)."""

    id: uuid.UUID
    first_name: str
    last_name: str | None = None
    email: str
    phone: str | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class AuthResponse(SQLModel):
    user: UserRead
    token: str
    token_type: str = "bearer"
