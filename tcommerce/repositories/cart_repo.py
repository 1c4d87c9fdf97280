# tcommerce/repositories/cart_repo.py
import uuid

from sqlalchemy import delete, func
from sqlmodel import Session, select

from tcommerce.models.cart import CartItem
from tcommerce.models.product import Product


class CartRepository:
    """
    Data access layer for cart_items.

    NOTE:
      - No commits here; every cart mutation is a multi-step transaction.
        CartService is responsible for commit/rollback.
    """

    def get_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        *,
        for_update: bool = False,
    ) -> CartItem | None:
        """
        Return the (user, product) line, optionally locking the row
        (SELECT ... FOR UPDATE) until the transaction ends.
        """
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        if for_update:
            stmt = stmt.with_for_update()
            # A locked re-read must not be served from the identity map
            stmt = stmt.execution_options(populate_existing=True)
        return session.exec(stmt).first()

    def list_active_with_products(
        self, session: Session, user_id: uuid.UUID
    ) -> list[tuple[CartItem, Product]]:
        """
        Lines joined with their product, active products only,
        most recently created first.
        """
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id, Product.is_active == True)
            .order_by(CartItem.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def sum_quantity(self, session: Session, user_id: uuid.UUID) -> int:
        """Raw unit count across all lines (no product filtering)."""
        stmt = select(func.coalesce(func.sum(CartItem.quantity), 0)).where(
            CartItem.user_id == user_id
        )
        return int(session.exec(stmt).one())

    def add(self, session: Session, item: CartItem) -> CartItem:
        """Insert without committing, but flush so constraints fire now."""
        session.add(item)
        session.flush()
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.flush()
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.flush()

    def delete_for_user(self, session: Session, user_id: uuid.UUID) -> int:
        """Bulk delete every line of a user; returns the deleted row count."""
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        result = session.execute(stmt)
        return result.rowcount or 0
