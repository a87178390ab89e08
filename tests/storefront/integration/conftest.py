import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from storefront.api import cart_router, order_router, register_exception_handlers
from storefront.api.auth import issue_token
from storefront.domain import storefront


@pytest.fixture()
def app():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(cart_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def _auth_headers(user_id, role):
    return {"Authorization": f"Bearer {issue_token(user_id, role)}"}


@pytest.fixture()
def auth_headers():
    return _auth_headers


@pytest.fixture()
def user_headers():
    return _auth_headers("cust-001", "user")


@pytest.fixture()
def admin_headers():
    return _auth_headers("admin-001", "admin")


@pytest.fixture()
def checkout_body():
    return {
        "shippingAddress": {
            "fullName": "Jane Doe",
            "address": "123 Main Street, Apt 4",
            "city": "Springfield",
            "postalCode": "12345",
            "country": "USA",
        },
        "notes": "Leave at the door",
    }
