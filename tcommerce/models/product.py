# tcommerce/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    The cart reads price, stock_quantity and is_active from this table
    but never writes to it.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(default=None, max_length=1000)

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        gt=0,
        description="Current unit price",
    )

    original_price: Decimal | None = Field(
        default=None,
        max_digits=10,
        decimal_places=2,
        description="Price before discount, if any",
    )

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        index=True,
    )

    sku: str | None = Field(
        default=None,
        max_length=50,
        unique=True,
        index=True,
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    image_url: str | None = None

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible and purchasable",
    )

    is_featured: bool = Field(default=False, index=True)

    weight: Decimal | None = Field(default=None, max_digits=10, decimal_places=3)
    unit: str | None = Field(default=None, max_length=20)
    brand: str | None = Field(default=None, max_length=100)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
