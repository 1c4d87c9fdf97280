# tcommerce/schemas/cart.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field


def _whole_number(v):
    """
    Reject booleans, strings and fractional numbers before int coercion,
    so "3", true and 2.5 are not silently turned into quantities.
    """
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError("quantity must be an integer")
    if isinstance(v, float) and not v.is_integer():
        raise ValueError("quantity must be an integer")
    return v


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    `product_id` may also be sent as `productId`; quantity defaults to 1.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)

    @model_validator(mode="before")
    @classmethod
    def accept_camel_case_product_id(cls, data):
        if isinstance(data, dict) and "productId" in data:
            data = dict(data)
            camel = data.pop("productId")
            data.setdefault("product_id", camel)
        return data

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_is_whole(cls, v):
        return _whole_number(v)


class CartItemUpdate(SQLModel):
    """
    Payload for replacing the quantity of a cart line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_is_whole(cls, v):
        return _whole_number(v)


class CartItemRead(SQLModel):
    """
    A single cart line as stored (returned by add/update/remove).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    created_at: datetime
    updated_at: datetime


class CartLineView(CartItemRead):
    """
    Cart line joined with the current product state.
    """

    product_name: str
    current_price: Decimal
    stock_quantity: int
    image_url: str | None = None
    subtotal: Decimal


class CartSummary(SQLModel):
    total_items: int
    total_amount: Decimal


class CartView(SQLModel):
    """
    Full cart response: visible lines plus totals.
    """

    items: list[CartLineView]
    summary: CartSummary


class CartCount(SQLModel):
    total_items: int


class CartCleared(SQLModel):
    items_removed: int
    message: str = "Cart cleared successfully"
