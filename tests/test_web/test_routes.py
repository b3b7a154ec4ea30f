"""Tests for the search API routes."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from property_search.config import Settings
from property_search.db import InMemoryPropertyRepository, PropertyStorage
from property_search.models import Property
from property_search.repository import RepositoryPage, RepositoryQuery
from property_search.web.app import create_app
from property_search.web.routes import router


class UnavailableRepository:
    async def search(self, query: RepositoryQuery) -> RepositoryPage:
        raise OSError("database is locked")

    async def find_near_location(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Property]:
        raise OSError("database is locked")


@pytest.fixture
def settings() -> Settings:
    return Settings(database_path=":memory:", default_page_size=10)


@pytest.fixture
def app(memory_repository: InMemoryPropertyRepository, settings: Settings) -> FastAPI:
    app = FastAPI()
    app.state.repository = memory_repository
    app.state.settings = settings
    app.include_router(router)
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestSearchGet:
    def test_camel_case_result(self, client: TestClient) -> None:
        response = client.get("/api/properties/search", params={"city": "Miami"})

        assert response.status_code == 200
        data = response.json()
        assert [item["id"] for item in data["items"]] == ["p4", "p2", "p1"]
        assert data["total"] == 3
        assert data["hasMore"] is False
        assert data["pageSize"] == 10
        assert data["facets"]["applied"] == ["City: Miami"]
        assert "priceRange" in data["facets"]["available"]
        assert data["statistics"]["totalListings"] == 3
        assert "pricePerSqm" in data["items"][0]

    def test_default_page_size_from_settings(self, client: TestClient) -> None:
        data = client.get("/api/properties/search").json()
        assert data["pageSize"] == 10

    def test_repeated_and_comma_values(self, client: TestClient) -> None:
        response = client.get(
            "/api/properties/search?propertyTypes=villa,apartment&amenities=gym"
        )
        assert [item["id"] for item in response.json()["items"]] == ["p2", "p1"]

    def test_geo_search(self, client: TestClient) -> None:
        response = client.get(
            "/api/properties/search",
            params={"lat": "25.7617", "lng": "-80.1918", "radius": "15"},
        )
        assert [item["id"] for item in response.json()["items"]] == ["p2", "p1"]

    def test_text_query(self, client: TestClient) -> None:
        response = client.get("/api/properties/search", params={"query": "villa pool"})
        assert [item["id"] for item in response.json()["items"]] == ["p1"]

    def test_validation_error(self, client: TestClient) -> None:
        response = client.get(
            "/api/properties/search", params={"minPrice": "500", "maxPrice": "100"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["fields"] == ["min_price", "max_price"]
        assert "minimum price cannot be greater than maximum price" in body["error"]

    def test_limit_over_maximum(self, client: TestClient) -> None:
        response = client.get("/api/properties/search", params={"limit": "500"})
        assert response.status_code == 400
        assert response.json()["fields"] == ["limit"]

    def test_repository_failure_is_503_with_generic_message(self, settings: Settings) -> None:
        app = FastAPI()
        app.state.repository = UnavailableRepository()
        app.state.settings = settings
        app.include_router(router)

        response = TestClient(app).get("/api/properties/search")

        assert response.status_code == 503
        assert "database is locked" not in response.text
        assert response.json()["error"].startswith("Search is currently unavailable")


class TestSearchPost:
    def test_json_form_fields(self, client: TestClient) -> None:
        response = client.post(
            "/api/properties/search",
            json={"bedrooms": 3, "amenities": ["pool"], "featured": True, "limit": 5},
        )

        assert response.status_code == 200
        data = response.json()
        assert [item["id"] for item in data["items"]] == ["p1"]
        assert data["pageSize"] == 5

    def test_null_values_are_ignored(self, client: TestClient) -> None:
        response = client.post("/api/properties/search", json={"city": None, "minPrice": None})
        assert response.status_code == 200
        assert response.json()["total"] == 6

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/api/properties/search", json=["city", "Miami"])
        assert response.status_code == 400

    def test_malformed_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/properties/search",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400

    def test_validation_error(self, client: TestClient) -> None:
        response = client.post("/api/properties/search", json={"propertyType": "castle"})
        assert response.status_code == 400
        assert response.json()["fields"] == ["property_types"]


@pytest_asyncio.fixture
async def seeded_db(tmp_path: Path, catalog: list[Property]) -> AsyncGenerator[str, None]:
    db_path = str(tmp_path / "properties.db")
    storage = PropertyStorage(db_path)
    await storage.initialize()
    await storage.save_properties(catalog)
    await storage.close()
    yield db_path


class TestCreateApp:
    @pytest.mark.asyncio
    async def test_app_serves_from_sqlite(self, seeded_db: str) -> None:
        app = create_app(Settings(database_path=seeded_db))

        with TestClient(app) as client:
            response = client.get("/api/properties/search", params={"state": "FL"})

        assert response.status_code == 200
        assert response.json()["total"] == 4

    def test_security_headers(self, tmp_path: Path) -> None:
        app = create_app(Settings(database_path=str(tmp_path / "empty.db")))

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
