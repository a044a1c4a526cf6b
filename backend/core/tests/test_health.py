"""Tests for the health probe."""

import pytest
from django.db.utils import OperationalError

from core import health

pytestmark = pytest.mark.django_db


def test_healthz_ok(api_client):
    resp = api_client.get("/api/healthz")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"


def test_healthz_reports_database_failure(api_client, monkeypatch):
    class _BrokenConnection:
        def cursor(self):
            raise OperationalError("database is gone")

    monkeypatch.setattr(health, "connection", _BrokenConnection())

    resp = api_client.get("/api/healthz")

    assert resp.status_code == 503
    assert resp.json()["status"] == "error"


def test_healthz_rejects_post(api_client):
    assert api_client.post("/api/healthz").status_code == 405
