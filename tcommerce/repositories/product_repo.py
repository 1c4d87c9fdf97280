# tcommerce/repositories/product_repo.py
import uuid

from sqlalchemy import or_
from sqlmodel import Session, select

from tcommerce.models.product import Product

# Columns a client may sort the product listing by
SORTABLE_FIELDS = ("name", "price", "created_at", "updated_at", "stock_quantity")


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - get_by_id is also the read path the cart uses to look up
      price / stock / active flag.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id, populate_existing=True)

    def get_by_sku(self, session: Session, sku: str) -> Product | None:
        stmt = select(Product).where(Product.sku == sku)
        return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        category_id: uuid.UUID | None = None,
        is_featured: bool | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if is_featured is not None:
            stmt = stmt.where(Product.is_featured == is_featured)

        # Unknown sort options fall back to name ascending
        if sort_by not in SORTABLE_FIELDS or sort_order not in ("asc", "desc"):
            sort_by, sort_order = "name", "asc"
        column = getattr(Product, sort_by)
        stmt = stmt.order_by(column.desc() if sort_order == "desc" else column.asc())

        stmt = stmt.offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def search(
        self,
        session: Session,
        term: str,
        category_id: uuid.UUID | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        """Case-insensitive match on name, description or brand (active only)."""
        pattern = f"%{term}%"
        stmt = select(Product).where(
            Product.is_active == True,
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.brand.ilike(pattern),
            ),
        )
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        stmt = stmt.order_by(Product.name).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
