# tcommerce/services/product_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from tcommerce.models.product import Product
from tcommerce.repositories.category_repo import CategoryRepository
from tcommerce.repositories.product_repo import ProductRepository
from tcommerce.schemas.product import ProductCreate, ProductUpdate

# Minimum length of a search term
MIN_SEARCH_LENGTH = 2


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - SKU uniqueness
      - category existence checks
      - listing / search / featured queries
      - stock and activation changes (the cart only ever reads these)
    """

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        self.repo = repo
        self.category_repo = category_repo

    # ----- Helpers -----

    def _ensure_category(self, session: Session, category_id: uuid.UUID) -> None:
        if self.category_repo.get_by_id(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category not found",
            )

    def _ensure_sku_free(
        self, session: Session, sku: str | None, exclude_id: uuid.UUID | None = None
    ) -> None:
        if not sku:
            return
        existing = self.repo.get_by_sku(session, sku)
        if existing is not None and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product with this SKU already exists",
            )

    # ----- Queries -----

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
        return self.repo.list_products(
            session,
            skip=skip,
            limit=limit,
            only_active=only_active,
            category_id=category_id,
            is_featured=is_featured,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def list_featured(self, session: Session, limit: int = 10) -> list[Product]:
        return self.repo.list_products(session, limit=limit, is_featured=True)

    def list_by_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        if self.category_repo.get_by_id(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return self.repo.list_products(session, skip=skip, limit=limit, category_id=category_id)

    def search(
        self,
        session: Session,
        term: str,
        category_id: uuid.UUID | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        term = term.strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Search query must be at least 2 characters long",
            )
        return self.repo.search(
            session, term, category_id=category_id, skip=skip, limit=limit
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    # ----- Mutations -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        self._ensure_category(session, payload.category_id)
        self._ensure_sku_free(session, payload.sku)

        product = Product(**payload.model_dump())
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product; only fields sent by the client apply.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update",
            )

        if changes.get("category_id") is not None:
            self._ensure_category(session, changes["category_id"])
        if "sku" in changes:
            self._ensure_sku_free(session, changes["sku"], exclude_id=product.id)

        for field, value in changes.items():
            setattr(product, field, value)
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def update_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        stock_quantity: int,
    ) -> Product:
        product = self.get_product(session, product_id)
        product.stock_quantity = stock_quantity
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def deactivate_product(self, session: Session, product_id: uuid.UUID) -> Product:
        """
        Hide a product from the storefront. Existing cart lines are kept
        but drop out of the cart view.
        """
        product = self.get_product(session, product_id)
        product.is_active = False
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Hard delete. Products still referenced by cart lines cannot be
        deleted (409); deactivate them instead.
        """
        product = self.get_product(session, product_id)
        try:
            self.repo.delete(session, product)
        except IntegrityError:
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product is referenced by carts; deactivate it instead",
            )
