# tcommerce/routers/products.py
import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from tcommerce.core.auth import require_auth
from tcommerce.database import get_session
from tcommerce.repositories.category_repo import CategoryRepository
from tcommerce.repositories.product_repo import ProductRepository
from tcommerce.schemas.product import (
    ProductCreate,
    ProductRead,
    ProductStockUpdate,
    ProductUpdate,
)
from tcommerce.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo, CategoryRepository())


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    only_active: bool = True,
    category_id: uuid.UUID | None = None,
    is_featured: bool | None = None,
    sort_by: str = "name",
    sort_order: Literal["asc", "desc"] = "asc",
):
    """
    List products.

    - `only_active=True` hides inactive products by default.
    - Unknown `sort_by` values fall back to name ascending.
    """
    return service.list_products(
        session,
        skip=skip,
        limit=limit,
        only_active=only_active,
        category_id=category_id,
        is_featured=is_featured,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/featured", response_model=list[ProductRead])
def list_featured_products(
    session: Session = Depends(get_session),
    limit: int = Query(10, ge=1, le=100),
):
    return service.list_featured(session, limit=limit)


@router.get("/search", response_model=list[ProductRead])
def search_products(
    q: str,
    session: Session = Depends(get_session),
    category_id: uuid.UUID | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    """
    Case-insensitive search on name, description and brand.
    """
    return service.search(session, q, category_id=category_id, skip=skip, limit=limit)


@router.get("/category/{category_id}", response_model=list[ProductRead])
def list_products_by_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    return service.list_by_category(session, category_id, skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_product(session, product_id)


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    return service.create_product(session, payload)


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_auth)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    return service.update_product(session, product_id, payload)


@router.patch(
    "/{product_id}/stock",
    response_model=ProductRead,
    dependencies=[Depends(require_auth)],
)
def update_product_stock(
    product_id: uuid.UUID,
    payload: ProductStockUpdate,
    session: Session = Depends(get_session),
):
    return service.update_stock(session, product_id, payload.stock_quantity)


@router.patch(
    "/{product_id}/deactivate",
    response_model=ProductRead,
    dependencies=[Depends(require_auth)],
)
def deactivate_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.deactivate_product(session, product_id)


@router.delete(
    "/{product_id}",
    dependencies=[Depends(require_auth)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    service.delete_product(session, product_id)
    return {"message": "Product deleted successfully"}
