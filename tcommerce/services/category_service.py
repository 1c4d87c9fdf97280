# tcommerce/services/category_service.py
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from tcommerce.models.category import Category
from tcommerce.repositories.category_repo import CategoryRepository
from tcommerce.schemas.category import CategoryCreate, CategoryUpdate


class CategoryService:
    """
    Business logic for categories: unique names, soft deactivation.
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def _ensure_name_free(
        self, session: Session, name: str, exclude_id: uuid.UUID | None = None
    ) -> None:
        existing = self.repo.get_by_name(session, name)
        if existing is not None and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Category with this name already exists",
            )

    def list_categories(self, session: Session, only_active: bool = True) -> list[Category]:
        return self.repo.list_categories(session, only_active=only_active)

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        self._ensure_name_free(session, payload.name)
        category = Category(
            name=payload.name,
            description=payload.description,
            image_url=payload.image_url,
            is_active=payload.is_active,
        )
        return self.repo.create(session, category)

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        """
        Partial update; only fields present in the payload are applied.
        """
        category = self.get_category(session, category_id)
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid fields to update",
            )

        if "name" in changes and changes["name"] is not None:
            self._ensure_name_free(session, changes["name"], exclude_id=category.id)

        for field, value in changes.items():
            setattr(category, field, value)
        category.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        """
        Hard delete. Categories still referenced by products cannot be
        deleted (409); deactivate them instead.
        """
        category = self.get_category(session, category_id)
        try:
            self.repo.delete(session, category)
        except IntegrityError:
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Category still has products; deactivate it instead",
            )

    def deactivate_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.get_category(session, category_id)
        category.is_active = False
        category.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, category)
