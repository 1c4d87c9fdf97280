# tcommerce/repositories/category_repo.py
import uuid

from sqlmodel import Session, select

from tcommerce.models.category import Category


class CategoryRepository:
    """
    Data access layer for Category.
    """

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(Category.name == name)
        return session.exec(stmt).first()

    def list_categories(self, session: Session, only_active: bool = True) -> list[Category]:
        stmt = select(Category)
        if only_active:
            stmt = stmt.where(Category.is_active == True)
        stmt = stmt.order_by(Category.name)
        return list(session.exec(stmt).all())

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def update(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete(self, session: Session, category: Category) -> None:
        session.delete(category)
        session.commit()
