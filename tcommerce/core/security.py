# tcommerce/core/security.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from passlib.context import CryptContext

from tcommerce.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


class InvalidTokenError(Exception):
    """Raised when a token cannot be decoded, is expired or lacks claims."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issue a signed access token.

    Claims:
      - sub: user id (string UUID)
      - email
      - exp: now + JWT_EXPIRES_MINUTES (or expires_delta)
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    )
    claims = {"sub": str(user_id), "email": email, "exp": expire}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (signature + exp).

    Raises:
        InvalidTokenError: if token is invalid/expired or has no "sub".
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError as e:
        raise InvalidTokenError("Invalid or expired token") from e

    if not payload.get("sub"):
        raise InvalidTokenError("Token missing sub")
    return payload
