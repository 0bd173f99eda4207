"""Tests for the HTTP surface."""

from urllib.parse import parse_qs, urlsplit

import pytest
from httpx import ASGITransport, AsyncClient

from shortlink.api.dependencies import get_mapping_repository
from shortlink.core.config import EnvironmentType, settings
from shortlink.repositories.base import RepositoryError
from shortlink.repositories.mapping_repository import MappingRepository
from tests.utils import create_test_mapping


class FailingRepository(MappingRepository):

    async def find_by_slug(self, db, slug):
        raise RepositoryError("connection reset")

    async def insert(self, db, data):
        raise RepositoryError("connection reset")


def error_query(response) -> str:
    """The ``error`` query parameter of a redirect's Location header."""
    location = urlsplit(response.headers["location"])
    assert location.path == "/"
    return parse_qs(location.query)["error"][0]


@pytest.fixture
def failing_store(test_app):
    test_app.dependency_overrides[get_mapping_repository] = lambda: FailingRepository()
    yield
    test_app.dependency_overrides.pop(get_mapping_repository, None)


@pytest.mark.api
class TestCreateEndpoint:

    @pytest.mark.asyncio
    async def test_round_trip_generated_slug(self, client):
        response = await client.post("/url", json={"url": "https://example.com/a/b"})

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "slug", "url"}
        assert body["url"] == "https://example.com/a/b"
        assert len(body["slug"]) == 5
        assert isinstance(body["id"], int)

        redirect = await client.get(f"/{body['slug']}")
        assert redirect.status_code == 302
        assert redirect.headers["location"] == "https://example.com/a/b"

    @pytest.mark.asyncio
    async def test_custom_slug_case(self, client):
        response = await client.post("/url", json={"slug": "My-Link", "url": "https://x.test"})

        assert response.status_code == 200
        assert response.json()["slug"] == "my-link"

        mixed = await client.get("/My-Link")
        assert mixed.status_code == 404
        assert error_query(mixed) == "My-Link not found"

        lower = await client.get("/my-link")
        assert lower.status_code == 302
        assert lower.headers["location"] == "https://x.test"

    @pytest.mark.asyncio
    async def test_slug_in_use(self, client, test_db):
        await create_test_mapping(test_db, slug="taken", url="https://first.example.com")

        response = await client.post("/url", json={"slug": "taken", "url": "https://second.example.com"})

        assert response.status_code == 409
        body = response.json()
        assert body["message"] == "Slug in use"
        assert "stack" in body

        still = await client.get("/taken")
        assert still.headers["location"] == "https://first.example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {},
        {"url": "not a url"},
        {"url": "https://example.com/a\u0000b"},
        {"url": "https://example.com", "slug": "bad slug!"},
    ])
    async def test_validation_errors(self, client, payload):
        response = await client.post("/url", json=payload)

        assert response.status_code == 400
        assert set(response.json()) == {"message", "stack"}

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        response = await client.post(
            "/url", content="{not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 422
        assert set(response.json()) == {"message", "stack"}

    @pytest.mark.asyncio
    async def test_undecodable_body(self, client):
        response = await client.post(
            "/url",
            content=b'{"url": "https://example.com/\xff"}',
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"message", "stack"}
        assert body["message"] == "There was an error parsing the body"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client):
        response = await client.delete("/url")

        assert response.status_code == 405
        assert "POST" in response.headers["allow"]
        assert set(response.json()) == {"message", "stack"}

    @pytest.mark.asyncio
    async def test_stack_shown_outside_production(self, client):
        response = await client.post("/url", json={"url": "nope"})

        assert "Traceback" in response.json()["stack"]

    @pytest.mark.asyncio
    async def test_stack_hidden_in_production(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", EnvironmentType.PRODUCTION)

        response = await client.post("/url", json={"url": "nope"})

        assert response.status_code == 400
        assert response.json()["stack"] == settings.STACK_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_store_failure(self, client, failing_store):
        response = await client.post("/url", json={"url": "https://example.com", "slug": "abc"})

        assert response.status_code == 500
        assert "connection reset" in response.json()["message"]


@pytest.mark.api
class TestRedirectEndpoint:

    @pytest.mark.asyncio
    async def test_redirect(self, client, test_db):
        await create_test_mapping(test_db, slug="known", url="https://example.org/target")

        response = await client.get("/known")

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.org/target"

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        response = await client.get("/missing")

        assert response.status_code == 404
        assert error_query(response) == "missing not found"

    @pytest.mark.asyncio
    async def test_store_failure(self, client, failing_store):
        response = await client.get("/anything")

        assert response.status_code == 500
        assert error_query(response) == "Server error"


@pytest.mark.api
class TestAmbientRoutes:

    @pytest.mark.asyncio
    async def test_landing_page(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == settings.APP_NAME

    @pytest.mark.asyncio
    async def test_security_and_request_headers(self, client):
        response = await client.get("/missing")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "SAMEORIGIN"
        assert response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/", headers={"X-Request-ID": "abc-123"})
        assert response.headers["x-request-id"] == "abc-123"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"]["database"]["status"] == "healthy"
        assert body["mappings"] == 0

    @pytest.mark.asyncio
    async def test_readiness_and_liveness(self, client):
        ready = await client.get("/api/health/ready")
        live = await client.get("/api/health/live")

        assert ready.json()["ready"] is True
        assert live.json() == {"alive": True}

    @pytest.mark.asyncio
    async def test_unhandled_error_shape(self, test_app, monkeypatch):
        async def explode(self, db, slug):
            raise RuntimeError("boom")

        monkeypatch.setattr(MappingRepository, "find_by_slug", explode)
        transport = ASGITransport(app=test_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as raw_client:
            response = await raw_client.post("/url", json={"url": "https://example.com", "slug": "x"})

        assert response.status_code == 500
        assert response.json()["message"] == "boom"
