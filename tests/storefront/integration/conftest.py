"""Fixtures for HTTP API tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import cart_router, offer_router, order_router, product_router
from storefront.api.errors import register_error_handlers

USER = {"Authorization": "Bearer user:user-001"}
OTHER_USER = {"Authorization": "Bearer user:user-002"}
ADMIN = {"Authorization": "Bearer admin:admin-001"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(offer_router)
    app.include_router(product_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def user_headers():
    return USER


@pytest.fixture()
def other_user_headers():
    return OTHER_USER


@pytest.fixture()
def admin_headers():
    return ADMIN
