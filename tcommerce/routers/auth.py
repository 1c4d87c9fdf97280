# tcommerce/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from tcommerce.core.auth import require_auth
from tcommerce.database import get_session
from tcommerce.models.user import User
from tcommerce.repositories.user_repo import UserRepository
from tcommerce.schemas.user import AuthResponse, UserLogin, UserRead, UserRegister
from tcommerce.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = UserService(repo)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserRegister,
    session: Session = Depends(get_session),
):
    """
    Create an account and return it with an access token.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UserLogin,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for an access token.
    """
    return service.login(session, payload)


@router.get("/profile", response_model=UserRead)
def read_profile(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.
    """
    return service.get_profile(current_user)
