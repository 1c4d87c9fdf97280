# tcommerce/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from tcommerce.core.auth import require_auth
from tcommerce.database import get_session
from tcommerce.models.user import User
from tcommerce.repositories.cart_repo import CartRepository
from tcommerce.repositories.product_repo import ProductRepository
from tcommerce.schemas.cart import (
    CartCleared,
    CartCount,
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartView,
)
from tcommerce.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

# Built once; handed to handlers through get_cart_service so tests
# (or another persistence setup) can override it.
_service = CartService(CartRepository(), ProductRepository())


def get_cart_service() -> CartService:
    return _service


@router.get("", response_model=CartView)
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Get the current user's cart: lines of active products plus totals.
    """
    return service.get_cart_items(session, current_user.id)


@router.get("/count", response_model=CartCount)
def get_cart_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Total units in the cart, including lines of deactivated products.
    """
    return CartCount(total_items=service.get_item_count(session, current_user.id))


@router.post("/add", response_model=CartItemRead, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Add a product to the cart, or increase the quantity of its line.

    Returns the resulting line.
    """
    return service.add_item(
        session,
        owner_id=current_user.id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.put("/{product_id}", response_model=CartItemRead)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Replace the quantity of a product already in the cart.
    """
    return service.update_quantity(
        session,
        owner_id=current_user.id,
        product_id=product_id,
        quantity=payload.quantity,
    )


@router.delete("/{product_id}", response_model=CartItemRead)
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Remove a product from the cart. Returns the removed line.
    """
    return service.remove_item(session, current_user.id, product_id)


@router.delete("", response_model=CartCleared)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: CartService = Depends(get_cart_service),
):
    """
    Remove every line from the cart.
    """
    return CartCleared(items_removed=service.clear_cart(session, current_user.id))
