# tcommerce/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from tcommerce.models.user import User


class UserRepository:
    """
    Account storage for shoppers.

    Accounts are local rows (bcrypt hash, no external identity provider),
    looked up by id for bearer-token principals and by lowercase email
    for login and duplicate checks. Accounts are deactivated, never
    deleted, so carts keep a valid owner.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Emails are stored lowercased by the registration schema."""
        stmt = select(User).where(User.email == email.lower())
        return session.exec(stmt).first()

    def create(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist profile or login bookkeeping (e.g. last_login)."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
