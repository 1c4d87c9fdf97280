# tcommerce/routers/categories.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from tcommerce.core.auth import require_auth
from tcommerce.database import get_session
from tcommerce.repositories.category_repo import CategoryRepository
from tcommerce.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from tcommerce.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

repo = CategoryRepository()
service = CategoryService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[CategoryRead])
def list_categories(
    session: Session = Depends(get_session),
    only_active: bool = True,
):
    """
    List categories, active ones only by default.
    """
    return service.list_categories(session, only_active=only_active)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_category(session, category_id)


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    return service.create_category(session, payload)


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_auth)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    return service.update_category(session, category_id, payload)


@router.delete(
    "/{category_id}",
    dependencies=[Depends(require_auth)],
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    service.delete_category(session, category_id)
    return {"message": "Category deleted successfully"}


@router.patch(
    "/{category_id}/deactivate",
    response_model=CategoryRead,
    dependencies=[Depends(require_auth)],
)
def deactivate_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Soft delete: hide the category from the default listing.
    """
    return service.deactivate_category(session, category_id)
