"""Tests for the unauthenticated service endpoints."""

import pytest
from httpx import AsyncClient

from app.config import settings

pytestmark = pytest.mark.asyncio


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": settings.app_name}


async def test_root(client: AsyncClient) -> None:
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == settings.app_version
    assert data["docs"] == "/docs"
