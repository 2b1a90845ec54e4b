from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from storefront.context import RequestContext, get_context
from storefront.models import Role, User
from storefront.routes.auth import router as auth_router
from tests.conftest import CUSTOMER_EMAIL, CUSTOMER_PASSWORD, login, read_session


def test_register_and_login_creates_customer_session(client, db):
    response = client.post(
        "/register",
        data={"email": "new@example.com", "password": "s3cret"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    assert response.headers["location"] == "/login"

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.role == Role.CUSTOMER.value
    assert user.password != "s3cret"

    response = login(client, "new@example.com", "s3cret")
    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert read_session(client)["user"] == {"id": user.id, "email": "new@example.com", "role": "customer"}


def test_register_duplicate_email_returns_generic_error(client, customer_id):
    response = client.post(
        "/register",
        data={"email": CUSTOMER_EMAIL, "password": "other"},
        follow_redirects=False,
    )
    assert response.status_code == 500
    assert response.text == "Error registering user. Email might already be taken."


def test_login_wrong_password_redirects_without_session(client, customer_id):
    response = login(client, CUSTOMER_EMAIL, "wrong-password")
    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert read_session(client) == {}


def test_login_unknown_email_redirects_without_session(client):
    response = login(client, "nobody@example.com", "whatever")
    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert read_session(client) == {}


def test_logout_clears_session(customer_client):
    assert read_session(customer_client)["user"]["email"] == CUSTOMER_EMAIL

    response = customer_client.get("/logout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert read_session(customer_client) == {}

    response = customer_client.get("/cart", follow_redirects=False)
    assert response.headers["location"] == "/login"


def test_login_and_register_pages_render(client):
    assert "Login" in client.get("/login").text
    assert "Register" in client.get("/register").text


def test_session_keeps_login_snapshot(customer_client, db, customer_id):
    # Promoting the user in the database does not change an existing session
    db.query(User).filter(User.id == customer_id).update({User.role: Role.ADMIN.value})
    db.commit()

    response = customer_client.get("/admin", follow_redirects=False)
    assert response.headers["location"] == "/"

    customer_client.get("/logout", follow_redirects=False)
    login(customer_client, CUSTOMER_EMAIL, CUSTOMER_PASSWORD)
    assert customer_client.get("/admin", follow_redirects=False).status_code == 200


def test_logout_falls_back_to_home_when_session_is_unavailable():
    # An app without the session middleware cannot clear anything
    bare_app = FastAPI()
    bare_app.include_router(auth_router)

    def context_without_session(request: Request):
        return RequestContext(request=request, db=None, user=None)

    bare_app.dependency_overrides[get_context] = context_without_session

    response = TestClient(bare_app).get("/logout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/"
