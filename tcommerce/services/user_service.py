# tcommerce/services/user_service.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from tcommerce.core.security import create_access_token, hash_password, verify_password
from tcommerce.models.user import User
from tcommerce.repositories.user_repo import UserRepository
from tcommerce.schemas.user import AuthResponse, UserLogin, UserRead, UserRegister

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for accounts.

    Responsibilities:
      - registration with unique email and hashed password
      - credential check + token issuance on login
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def _auth_response(user: User) -> AuthResponse:
        return AuthResponse(
            user=UserRead.model_validate(user, from_attributes=True),
            token=create_access_token(user.id, user.email),
        )

    def register(self, session: Session, payload: UserRegister) -> AuthResponse:
        """
        Create an account and return it with a fresh access token.

        Raises:
            HTTPException(409): if the email is already registered.
        """
        if self.repo.get_by_email(session, payload.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User with this email already exists",
            )

        user = User(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            phone=payload.phone,
        )
        user = self.repo.create(session, user)
        logger.info("Registered user %s", user.id)
        return self._auth_response(user)

    def login(self, session: Session, payload: UserLogin) -> AuthResponse:
        """
        Verify credentials and issue a token.

        Unknown email and wrong password give the same 401 message.
        """
        user = self.repo.get_by_email(session, payload.email)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account has been deactivated",
            )

        if not verify_password(payload.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        user.last_login = datetime.now(timezone.utc)
        user = self.repo.update(session, user)
        return self._auth_response(user)

    def get_profile(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user
