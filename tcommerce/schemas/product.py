# tcommerce/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductCreate(SQLModel):
    """
    Payload for creating a product.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=2, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: uuid.UUID
    sku: str | None = Field(default=None, max_length=50)
    stock_quantity: int = Field(default=0, ge=0)
    image_url: str | None = None
    is_active: bool = True
    is_featured: bool = False
    weight: Decimal | None = Field(default=None, gt=0)
    unit: str | None = Field(default=None, max_length=20)
    brand: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Product name must be at least 2 characters long")
        return v

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=2, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: uuid.UUID | None = None
    sku: str | None = Field(default=None, max_length=50)
    stock_quantity: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    weight: Decimal | None = Field(default=None, gt=0)
    unit: str | None = Field(default=None, max_length=20)
    brand: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Product name must be at least 2 characters long")
        return v


class ProductStockUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    stock_quantity: int = Field(ge=0)


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None = None
    price: Decimal
    original_price: Decimal | None = None
    category_id: uuid.UUID
    sku: str | None = None
    stock_quantity: int
    image_url: str | None = None
    is_active: bool
    is_featured: bool
    weight: Decimal | None = None
    unit: str | None = None
    brand: str | None = None
    created_at: datetime
    updated_at: datetime
