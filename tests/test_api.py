"""
API tests for the shorten, redirect and stats endpoints.

Uses httpx.AsyncClient against the ASGI app with the session dependency
pointed at a per-test SQLite database.
"""

import logging

import pytest
from fastapi import Depends

from shortener.api.endpoints import get_allocator, get_store
from shortener.db.store import UrlMappingStore
from shortener.main import app
from shortener.services.allocator import CodeAllocator
from shortener.services.code_generator import ShortCodeGenerator
from tests.fakes import SlowSession


@pytest.mark.asyncio
async def test_shorten_and_redirect(client):
    response = await client.post("/shorten", json={"url": "https://example.com/path?q=1"})

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert "error" not in body

    data = body["data"]
    code = data["shortCode"]
    assert len(code) == 7
    assert data["shortUrl"] == f"http://testserver/r/{code}"
    assert data["originalUrl"] == "https://example.com/path?q=1"

    redirect = await client.get(f"/r/{code}", follow_redirects=False)
    assert redirect.status_code == 302
    assert redirect.headers["location"] == "https://example.com/path?q=1"


@pytest.mark.asyncio
async def test_shorten_with_custom_code_and_conflict(client):
    first = await client.post(
        "/shorten", json={"url": "https://example.com/a", "customCode": "abc123"}
    )
    assert first.status_code == 201
    assert first.json()["data"]["shortUrl"] == "http://testserver/r/abc123"

    second = await client.post(
        "/shorten", json={"url": "https://example.com/b", "customCode": "abc123"}
    )
    assert second.status_code == 409
    body = second.json()
    assert body["success"] is False
    assert body["field"] == "customCode"
    assert "already in use" in body["error"]

    redirect = await client.get("/r/abc123", follow_redirects=False)
    assert redirect.headers["location"] == "https://example.com/a"


@pytest.mark.asyncio
async def test_shorten_rejects_invalid_url(client):
    response = await client.post("/shorten", json={"url": "not-a-url"})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Please enter a valid URL",
        "field": "url",
    }


@pytest.mark.asyncio
async def test_shorten_rejects_invalid_custom_code(client):
    response = await client.post(
        "/shorten", json={"url": "https://example.com", "customCode": "no spaces!"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["field"] == "customCode"


@pytest.mark.asyncio
async def test_padded_custom_code_is_rejected(client):
    response = await client.post(
        "/shorten", json={"url": "https://example.com", "customCode": " abc"}
    )

    assert response.status_code == 400
    assert response.json()["field"] == "customCode"

    # Nothing was stored under the trimmed code either
    stats = await client.get("/stats/abc")
    assert stats.status_code == 404


@pytest.mark.asyncio
async def test_whitespace_around_path_code_is_404(client):
    await client.post("/shorten", json={"url": "https://example.com", "customCode": "abc"})

    assert (await client.get("/r/%20abc", follow_redirects=False)).status_code == 404
    assert (await client.get("/stats/abc%20")).status_code == 404
    assert (await client.get("/r/abc", follow_redirects=False)).status_code == 302


@pytest.mark.asyncio
async def test_blank_custom_code_generates_one(client):
    response = await client.post(
        "/shorten", json={"url": "https://example.com", "customCode": "  "}
    )

    assert response.status_code == 201
    assert len(response.json()["data"]["shortCode"]) == 7


@pytest.mark.asyncio
async def test_missing_url_is_unprocessable(client):
    response = await client.post("/shorten", json={"customCode": "abc"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_redirect_unknown_code_is_404(client):
    response = await client.get("/r/doesnotexist", follow_redirects=False)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stats_report_clicks(client):
    await client.post("/shorten", json={"url": "https://example.com/s", "customCode": "stats"})
    await client.get("/r/stats", follow_redirects=False)
    await client.get("/r/stats", follow_redirects=False)

    response = await client.get("/stats/stats")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["shortCode"] == "stats"
    assert data["originalUrl"] == "https://example.com/s"
    assert data["clicks"] == 2
    assert {"id", "createdAt", "updatedAt"} <= data.keys()


@pytest.mark.asyncio
async def test_stats_unknown_code_is_404(client):
    response = await client.get("/stats/nothing")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_store_unavailable_is_503(client):
    app.dependency_overrides[get_store] = lambda: UrlMappingStore(SlowSession(), timeout=0.05)

    shorten = await client.post("/shorten", json={"url": "https://example.com"})
    assert shorten.status_code == 503
    assert shorten.json()["success"] is False

    redirect = await client.get("/r/abc123", follow_redirects=False)
    assert redirect.status_code == 503


@pytest.mark.asyncio
async def test_health_and_request_logging_header(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}
    assert "x-process-time" in response.headers


@pytest.mark.asyncio
async def test_exhausted_allocation_is_500_and_logged_once(client, caplog):
    class TakenGenerator(ShortCodeGenerator):
        def generate(self) -> str:
            return "taken01"

    def exhausting_allocator(store: UrlMappingStore = Depends(get_store)):
        return CodeAllocator(
            store=store,
            generator=TakenGenerator(length=7),
            base_url="http://testserver",
            path_prefix="/r",
            max_attempts=3,
        )

    await client.post("/shorten", json={"url": "https://example.com", "customCode": "taken01"})
    app.dependency_overrides[get_allocator] = exhausting_allocator

    with caplog.at_level(logging.ERROR, logger="shortener"):
        response = await client.post("/shorten", json={"url": "https://example.com/new"})

    assert response.status_code == 500
    assert response.json()["success"] is False
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
