"""Smoke tests for the BlockGrid FastAPI application.

- The application factory `create_app()` builds a FastAPI instance without side effects.
- `GET /health` responds with HTTP 200 and a JSON payload that includes:
    * "status": constant string "ok"
    * "environment": one of {"dev", "test", "prod"}
    * "version": matches `blockgrid.__version__`
"""

from __future__ import annotations

from typing import Final

from fastapi.testclient import TestClient

from blockgrid import __version__ as PKG_VERSION
from blockgrid.api.app import create_app

ALLOWED_ENVS: Final[set[str]] = {"dev", "test", "prod"}


def test_health_endpoint_contract() -> None:
    """`GET /health` returns a stable shape and expected values."""
    client = TestClient(create_app())

    resp = client.get("/health")
    assert resp.status_code == 200, "Health endpoint should return HTTP 200"

    data = resp.json()
    assert {"status", "environment", "version"}.issubset(data.keys())
    assert data["status"] == "ok"
    assert data["environment"] in ALLOWED_ENVS
    assert data["version"] == PKG_VERSION
