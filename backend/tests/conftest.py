"""
Pytest fixtures for the catalog API tests.

Provides an in-memory SQLite database shared by the app and the tests,
a TestClient with get_db overridden, and users with bearer tokens for
each role.
"""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models.users  # noqa: F401
import models.token  # noqa: F401
import models.store  # noqa: F401
import models.category  # noqa: F401
import models.product  # noqa: F401
import models.cart  # noqa: F401
import models.payment  # noqa: F401
import models.order  # noqa: F401
import models.review  # noqa: F401
import models.log  # noqa: F401
from main import app
from models.category import Category
from models.product import Product
from models.store import Store
from repositories.role import RoleRepository
from repositories.user import UserRepository
from utils.rate_limit import auth_limiter
from utils.tokenJWT import issue_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema and default roles for every test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    RoleRepository(db).seed_defaults()
    db.close()
    auth_limiter.reset()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_user(db, name, email, roles, password="password123"):
    user = UserRepository(db).create({"name": name, "email": email, "password": password}, role_names=roles)
    token = issue_token(db, user)
    return {"id": user.id, "email": user.email, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "Admin", "admin@example.com", ("admin",))


@pytest.fixture
def seller(db_session):
    return make_user(db_session, "Seller", "seller@example.com", ("seller",))


@pytest.fixture
def customer(db_session):
    return make_user(db_session, "Customer", "customer@example.com", ("customer",))


@pytest.fixture
def store(db_session):
    store = Store(name="Corner Books", city="Warsaw")
    db_session.add(store)
    db_session.commit()
    return store.id


@pytest.fixture
def category(db_session):
    category = Category(name="Books")
    db_session.add(category)
    db_session.commit()
    return category.id


@pytest.fixture
def product(db_session, store, category):
    product = Product(name="Novel", price=10.0, stock=5, status="active", store_id=store, category_id=category)
    db_session.add(product)
    db_session.commit()
    return product.id
