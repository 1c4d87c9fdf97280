"""
Pytest configuration and fixtures
"""
import os
from decimal import Decimal

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from tcommerce.core.security import create_access_token, hash_password
from tcommerce.database import get_session, use_immediate_transactions
from tcommerce.main import app
from tcommerce.models.category import Category
from tcommerce.models.product import Product
from tcommerce.models.user import User

TEST_PASSWORD = "Secret123!"

# Hashing is slow on purpose; hash once for every user the tests create
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(name="session")
def session_fixture():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    use_immediate_transactions(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Test client whose requests all run on the test session"""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: Session):
    def _make_user(email: str = "shopper@example.com", is_active: bool = True) -> User:
        user = User(
            first_name="Test",
            last_name="Shopper",
            email=email,
            password_hash=_PASSWORD_HASH,
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def category(session: Session) -> Category:
    category = Category(name="Groceries", description="Everyday goods")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def make_product(session: Session, category: Category):
    def _make_product(
        name: str = "Coffee Beans",
        price: str = "9.99",
        stock_quantity: int = 10,
        is_active: bool = True,
        **extra,
    ) -> Product:
        product = Product(
            name=name,
            price=Decimal(price),
            stock_quantity=stock_quantity,
            is_active=is_active,
            category_id=category.id,
            **extra,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def product(make_product) -> Product:
    return make_product()


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """Create authorization headers"""
    token = create_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    def _headers_for(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}

    return _headers_for
