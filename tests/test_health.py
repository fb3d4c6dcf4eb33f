"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_readiness_reports_store_and_cache(client: AsyncClient) -> None:
    """GET /api/v1/health/ready reports the configured store and the in-process cache."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["store"] is True
    assert data["cache"] == "memory"


async def test_request_id_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers.get("X-Request-ID") == "abc-123"


async def test_missing_context_returns_503(app, client: AsyncClient) -> None:
    """Store-backed routes answer 503 until the context is built."""
    app.state.context = None
    response = await client.get("/api/v1/municipalities")
    assert response.status_code == 503
    assert response.json()["error"] == "STORE_NOT_CONFIGURED"
    # Liveness has no dependencies
    assert (await client.get("/api/v1/health")).status_code == 200


def test_module_app_is_served_by_uvicorn_target() -> None:
    """civickey.main:app is the ASGI application uvicorn loads."""
    from fastapi import FastAPI

    from civickey.main import app

    assert isinstance(app, FastAPI)
    assert any(getattr(r, "path", None) == "/api/v1/health" for r in app.routes)
