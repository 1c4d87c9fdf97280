# tcommerce/models/category.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Product category.

    Deactivation is a soft delete: the row stays, but it is hidden
    from the default listing.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        unique=True,
        index=True,
    )

    description: str | None = Field(default=None, max_length=500)
    image_url: str | None = None

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
