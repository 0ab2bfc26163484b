"""Integration tests for the host application."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from albert_chat.api import create_app
from albert_chat.services import ChatServices


class TestHealthEndpoint:
    """Tests for GET /health."""

    @pytest.fixture
    async def client(self, services: ChatServices) -> AsyncGenerator[AsyncClient, None]:
        """Create async HTTP client with ASGI transport."""
        transport = ASGITransport(app=create_app(services))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    async def test_health_reports_healthy(self, client: AsyncClient) -> None:
        """Health check answers 200 with service status."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "albert-chat"
        assert data["store_failures"] == 0

    async def test_health_counts_store_failures(
        self, client: AsyncClient, services: ChatServices
    ) -> None:
        """Persistence failures show up in the health payload."""
        services.monitor.record_failure("store_message", "database unavailable")

        response = await client.get("/health")

        assert response.json()["store_failures"] == 1

    async def test_cors_allows_site_origin(self, client: AsyncClient) -> None:
        """Requests from the configured site get CORS headers."""
        response = await client.get("/health", headers={"Origin": "http://testserver"})

        assert response.headers["access-control-allow-origin"] == "http://testserver"

    async def test_wrong_http_method_returns_405(self, client: AsyncClient) -> None:
        """POST to the health endpoint is not allowed."""
        response = await client.post("/health")

        assert response.status_code == 405
