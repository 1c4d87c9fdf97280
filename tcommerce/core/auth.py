# tcommerce/core/auth.py
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from tcommerce.core.security import InvalidTokenError, decode_access_token
from tcommerce.database import get_session
from tcommerce.models.user import User
from tcommerce.repositories.user_repo import UserRepository

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header does not raise here,
#   so we can answer with our own 401 message.
bearer_scheme = HTTPBearer(auto_error=False)

users = UserRepository()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User:
    """
    Resolve the authenticated principal from a bearer token.

    Flow:
      1. No Authorization header => 401 (Unauthenticated).
      2. Decode JWT => extract 'sub' (user id).
      3. Load the user row; unknown user => 401.
      4. Deactivated account => 401 (AccountDisabled).

    Returns:
        The active User.
    """
    if credentials is None:
        raise _unauthorized("Access token is required")

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = uuid.UUID(payload["sub"])
    except (InvalidTokenError, ValueError):
        raise _unauthorized("Invalid or expired token")

    user = users.get_by_id(session, user_id)
    if user is None:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise _unauthorized("Account has been deactivated")

    return user


def require_auth(user: User = Depends(get_current_user)) -> User:
    """
    Enforce authentication on a route and return the User.
    """
    return user
