"""Shared pytest configuration and fixtures."""

import pytest
from rest_framework.test import APIClient

pytest_plugins = [
    "bookings.tests.fixtures",
]


@pytest.fixture
def api_client():
    """DRF API client for request/response helpers."""
    return APIClient()


@pytest.fixture
def auth_client():
    """Return a factory that logs a user in through the JWT endpoint."""

    def _auth(user, password: str = "testpass") -> APIClient:
        client = APIClient()
        token_resp = client.post(
            "/api/users/token/",
            {"username": user.username, "password": password},
            format="json",
        )
        token = token_resp.data["access"]
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    return _auth
