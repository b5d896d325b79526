"""Smoke tests for application startup and the health endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from commanderforge.main import app

    assert app.title == "CommanderForge"


@pytest.mark.asyncio
async def test_health_check() -> None:
    from commanderforge.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "app": "CommanderForge"}
