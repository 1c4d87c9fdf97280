# tcommerce/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered customer account.

    Identity:
      - id: UUID, also the JWT "sub" claim

    The password is stored only as a bcrypt hash. Deactivated accounts
    (is_active=False) cannot log in and are rejected by the auth dependency.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    first_name: str = Field(max_length=50)
    last_name: str | None = Field(default=None, max_length=50)

    email: str = Field(
        max_length=255,
        unique=True,
        index=True,
    )

    password_hash: str = Field(max_length=255)

    phone: str | None = Field(default=None, max_length=20)

    is_active: bool = Field(
        default=True,
        index=True,
        description="Deactivated accounts cannot authenticate",
    )

    last_login: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
