# tcommerce/models/cart.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Shopping cart line for a user.

    One user cannot have 2 rows for the same product; a line with
    quantity 0 is deleted rather than stored.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    unit_price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Price when first added to cart",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
