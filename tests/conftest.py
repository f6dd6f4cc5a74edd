import os
import uuid
from decimal import Decimal
from typing import Optional

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from storefront.api.auth import issue_token
from storefront.core.security import hash_password
from storefront.db import models  # noqa: F401  registers the tables
from storefront.db.base import Base
from storefront.db.models import Cart, Category, Product, User
from storefront.dependencies import get_db
from storefront.main import app

# Setup the database for testing
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_client():
    client = TestClient(app)
    yield client
    client.close()


# Override the get_db dependency to use the testing database
def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def create_test_user(
    db: Session,
    role: str = "USER",
    email: str = "user@example.com",
    is_active: bool = True,
    with_cart: bool = False,
) -> tuple[User, str]:
    password = "testpassword"
    user = User(
        email=email,
        first_name="Test",
        last_name="User",
        hashed_password=hash_password(password),
        role=role,
        is_active=is_active,
    )
    if with_cart:
        user.cart = Cart()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, password


def create_test_category(db: Session, name: str = "Electronics") -> Category:
    category = Category(name=name, description=f"{name} department")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def create_test_product(
    db: Session,
    category: Optional[Category] = None,
    name: str = "Test Product",
    price: str = "9.99",
    stock: int = 5,
    is_active: bool = True,
    sku: Optional[str] = None,
) -> Product:
    if category is None:
        category = create_test_category(db, name=f"Category {uuid.uuid4().hex[:8]}")
    product = Product(
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        sku=sku or f"SKU-{uuid.uuid4().hex[:8]}",
        stock=stock,
        images=[],
        is_active=is_active,
        category=category,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def auth_headers(db: Session, user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(db, user)}"}
