"""
Pytest configuration and fixtures.

The environment is set before any storefront module is imported so the
settings pick up an in-memory SQLite database and cheap bcrypt rounds.
"""

import base64
import json
import os
from decimal import Decimal

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_DIR"] = ""
os.environ["FIRST_ADMIN_EMAIL"] = ""
os.environ["FIRST_ADMIN_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient
from itsdangerous import BadSignature, TimestampSigner

from storefront.database import Base, SessionLocal, engine, init_db
from storefront.hashing import hash_password
from storefront.main import app
from storefront.models import CartItem, Product, Role, User

CUSTOMER_EMAIL = "customer@example.com"
CUSTOMER_PASSWORD = "customer-pass"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"


# ============================================================================
# Helpers
# ============================================================================

def read_session(client: TestClient) -> dict:
    """Decode the signed session cookie the way the session middleware wrote it."""
    cookie = client.cookies.get("session")
    if not cookie:
        return {}
    try:
        data = TimestampSigner(os.environ["SESSION_SECRET"]).unsign(cookie.encode("utf-8"))
    except BadSignature:
        # the cleared-session placeholder written on logout
        return {}
    return json.loads(base64.b64decode(data))


def login(client: TestClient, email: str, password: str):
    return client.post("/login", data={"email": email, "password": password}, follow_redirects=False)


def create_user(db, email: str, password: str, role: Role = Role.CUSTOMER) -> int:
    user = User(email=email, password=hash_password(password), role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user.id


def create_product(db, name: str, price: str, description: str = "", image_url: str = "") -> int:
    product = Product(name=name, description=description, price=Decimal(price), image_url=image_url)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product.id


def cart_quantities(db, user_id: int) -> dict:
    """Current {product_id: quantity} for a user, read fresh from the database."""
    db.expire_all()
    rows = db.query(CartItem.product_id, CartItem.quantity).filter(CartItem.user_id == user_id).all()
    return {row.product_id: row.quantity for row in rows}


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def customer_id(db):
    return create_user(db, CUSTOMER_EMAIL, CUSTOMER_PASSWORD)


@pytest.fixture
def admin_id(db):
    return create_user(db, ADMIN_EMAIL, ADMIN_PASSWORD, role=Role.ADMIN)


@pytest.fixture
def products(db):
    return {
        "widget": create_product(db, "Widget", "10.00", "A useful widget", "/static/img/widget.png"),
        "gadget": create_product(db, "Gadget", "5.00", "A shiny gadget", "/static/img/gadget.png"),
    }


# ============================================================================
# Client Fixtures
# ============================================================================

@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def customer_client(customer_id):
    client = TestClient(app)
    response = login(client, CUSTOMER_EMAIL, CUSTOMER_PASSWORD)
    assert response.headers["location"] == "/"
    return client


@pytest.fixture
def admin_client(admin_id):
    client = TestClient(app)
    response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert response.headers["location"] == "/"
    return client
