# tcommerce/services/cart_service.py
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from tcommerce.core.exceptions import (
    CartError,
    InsufficientStock,
    InvalidQuantity,
    LineNotFound,
    PersistenceFailure,
    ProductUnavailable,
)
from tcommerce.models.cart import CartItem
from tcommerce.models.product import Product
from tcommerce.repositories.cart_repo import CartRepository
from tcommerce.repositories.product_repo import ProductRepository
from tcommerce.schemas.cart import (
    CartItemRead,
    CartLineView,
    CartSummary,
    CartView,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag
      - enforce line quantity <= stock_quantity inside the mutating transaction
      - pin unit_price from Product.price on first add
      - own commit/rollback for every mutation (repository never commits)
      - compute line subtotals and cart totals

    Every mutation either commits fully or rolls back fully and raises a
    CartError subclass; nothing here maps to HTTP.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    @contextmanager
    def _guard(self, operation: str):
        """Translate driver/ORM errors into PersistenceFailure."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("Cart %s failed in the database", operation)
            raise PersistenceFailure() from exc

    @contextmanager
    def _transaction(self, session: Session, operation: str):
        """
        Run the block as one transaction: commit on success,
        roll back on any failure and re-raise it (database errors typed
        as PersistenceFailure).
        """
        try:
            with self._guard(operation):
                yield
                session.commit()
        except Exception as exc:
            session.rollback()
            if isinstance(exc, CartError) and not isinstance(exc, PersistenceFailure):
                logger.warning("Cart %s rejected: %s", operation, exc.message)
            raise

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(quantity)

    def _get_available_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if product is None or not product.is_active:
            raise ProductUnavailable(product_id)
        return product

    @staticmethod
    def _ensure_stock(product: Product, requested: int) -> None:
        if requested > product.stock_quantity:
            raise InsufficientStock(product.id, requested, product.stock_quantity)

    def _insert_line(
        self,
        session: Session,
        owner_id: uuid.UUID,
        product: Product,
        quantity: int,
    ) -> CartItem | None:
        """
        Insert a new line inside a SAVEPOINT.

        Returns None if a concurrent transaction inserted the same
        (owner, product) first; the outer transaction stays usable.
        """
        item = CartItem(
            user_id=owner_id,
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
        )
        try:
            with session.begin_nested():
                self.cart_repo.add(session, item)
        except IntegrityError:
            logger.info(
                "Concurrent first add for user=%s product=%s, merging",
                owner_id,
                product.id,
            )
            return None
        return item

    @staticmethod
    def _to_read(item: CartItem) -> CartItemRead:
        return CartItemRead(
            id=item.id,
            user_id=item.user_id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    # ---- public operations ----

    def add_item(
        self,
        session: Session,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItemRead:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be active
          - quantity alone must fit in stock_quantity
          - existing line: existing + quantity must fit, unit_price kept
          - new line: unit_price = current product.price
        """
        self._check_quantity(quantity)

        with self._transaction(session, "add_item"):
            product = self._get_available_product(session, product_id)
            self._ensure_stock(product, quantity)

            item = self.cart_repo.get_item(session, owner_id, product_id, for_update=True)
            if item is None:
                item = self._insert_line(session, owner_id, product, quantity)
                if item is not None:
                    logger.info(
                        "Added to cart: user=%s product=%s qty=%s",
                        owner_id,
                        product_id,
                        quantity,
                    )
                    return self._to_read(item)

                item = self.cart_repo.get_item(
                    session, owner_id, product_id, for_update=True
                )
                if item is None:
                    raise PersistenceFailure("Cart line could not be created")

            new_quantity = item.quantity + quantity
            self._ensure_stock(product, new_quantity)

            item.quantity = new_quantity
            item.updated_at = datetime.now(timezone.utc)
            self.cart_repo.update(session, item)
            logger.info(
                "Cart quantity increased: user=%s product=%s qty=%s",
                owner_id,
                product_id,
                new_quantity,
            )
            result = self._to_read(item)

        return result

    def get_cart_items(self, session: Session, owner_id: uuid.UUID) -> CartView:
        """
        Return the cart view: lines of active products (newest first)
        with totals computed from the pinned unit prices.
        """
        with self._guard("get_cart_items"):
            rows = self.cart_repo.list_active_with_products(session, owner_id)

        lines: list[CartLineView] = []
        total_items = 0
        total_amount = Decimal("0")

        for item, product in rows:
            subtotal = item.quantity * item.unit_price
            total_items += item.quantity
            total_amount += subtotal

            lines.append(
                CartLineView(
                    **self._to_read(item).model_dump(),
                    product_name=product.name,
                    current_price=product.price,
                    stock_quantity=product.stock_quantity,
                    image_url=product.image_url,
                    subtotal=subtotal,
                )
            )

        return CartView(
            items=lines,
            summary=CartSummary(
                total_items=total_items,
                total_amount=total_amount.quantize(CENTS),
            ),
        )

    def update_quantity(
        self,
        session: Session,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> CartItemRead:
        """
        Replace the quantity of an existing line. Never creates a line.
        """
        self._check_quantity(quantity)

        with self._transaction(session, "update_quantity"):
            product = self._get_available_product(session, product_id)
            self._ensure_stock(product, quantity)

            item = self.cart_repo.get_item(session, owner_id, product_id, for_update=True)
            if item is None:
                raise LineNotFound(product_id)

            item.quantity = quantity
            item.updated_at = datetime.now(timezone.utc)
            self.cart_repo.update(session, item)
            logger.info(
                "Cart quantity set: user=%s product=%s qty=%s",
                owner_id,
                product_id,
                quantity,
            )
            result = self._to_read(item)

        return result

    def remove_item(
        self,
        session: Session,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartItemRead:
        """
        Delete a line and return its state before deletion.
        """
        with self._transaction(session, "remove_item"):
            item = self.cart_repo.get_item(session, owner_id, product_id, for_update=True)
            if item is None:
                raise LineNotFound(product_id)

            removed = self._to_read(item)
            self.cart_repo.delete(session, item)
            logger.info("Removed from cart: user=%s product=%s", owner_id, product_id)

        return removed

    def clear_cart(self, session: Session, owner_id: uuid.UUID) -> int:
        """
        Delete every line of the user. An empty cart yields 0, not an error.
        """
        with self._transaction(session, "clear_cart"):
            deleted = self.cart_repo.delete_for_user(session, owner_id)

        logger.info("Cleared cart: user=%s lines=%s", owner_id, deleted)
        return deleted

    def get_item_count(self, session: Session, owner_id: uuid.UUID) -> int:
        """
        Total units across all lines, including lines whose product
        has since been deactivated.
        """
        with self._guard("get_item_count"):
            return self.cart_repo.sum_quantity(session, owner_id)
