"""
AdoptMe Backend - Application Wiring Tests
===========================================

What:  Welcome page, health check, docs, error envelopes for unknown routes
       and the access-log level mapping.
"""

import logging

import pytest

from adoptme import __version__
from adoptme.middleware import level_for_status


class TestAppRoutes:
    @pytest.mark.asyncio
    async def test_welcome_page_links_docs(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'href="/api-docs"' in response.text

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == __version__

    @pytest.mark.asyncio
    async def test_api_docs(self, client):
        assert (await client.get("/api-docs")).status_code == 200
        schema = (await client.get("/openapi.json")).json()
        assert "/api/adoptions/{uid}/{pid}" in schema["paths"]

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client):
        response = await client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"status": "error", "error": "Not Found"}

    @pytest.mark.asyncio
    async def test_wrong_method_uses_error_envelope(self, client):
        response = await client.patch("/api/adoptions")
        assert response.status_code == 405
        assert response.json()["status"] == "error"


class TestLevelForStatus:
    @pytest.mark.parametrize(
        "status, level",
        [
            (200, logging.INFO),
            (304, logging.INFO),
            (400, logging.WARNING),
            (404, logging.WARNING),
            (500, logging.ERROR),
            (503, logging.ERROR),
        ],
    )
    def test_level(self, status, level):
        assert level_for_status(status) == level
