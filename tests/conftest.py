"""Shared pytest fixtures."""

import gc
import logging
import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from hypothesis import HealthCheck, settings

from property_search.config import Settings
from property_search.db import InMemoryPropertyRepository
from property_search.logging import configure_logging
from property_search.models import (
    Address,
    Coordinates,
    Price,
    Property,
    PropertyFeatures,
    PropertyStatus,
    PropertyType,
)

# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=10)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    """Route structlog output to stderr once, so stdout stays clean for CLI output."""
    configure_logging(level=logging.DEBUG)


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


@pytest.fixture(autouse=True)
def _cleanup_aiosqlite_threads():
    """Safety net: detect and stop leaked aiosqlite worker threads."""
    yield

    from aiosqlite.core import Connection

    leaked = False
    gc.collect()
    for obj in gc.get_objects():
        if isinstance(obj, Connection) and obj._connection is not None:
            leaked = True
            obj.stop()

    if leaked:
        import warnings

        warnings.warn(
            "Test leaked aiosqlite connection(s): add 'await storage.close()' to fixture teardown",
            ResourceWarning,
            stacklevel=1,
        )


def build_property(
    property_id: str,
    *,
    price: float = 250_000,
    bedrooms: int = 3,
    bathrooms: int = 2,
    area: float = 150,
    property_type: PropertyType = PropertyType.HOUSE,
    status: PropertyStatus = PropertyStatus.PUBLISHED,
    street: str = "1 Ocean Drive",
    city: str = "Miami",
    state: str = "FL",
    country: str = "USA",
    postal_code: str | None = "33139",
    latitude: float | None = 25.7617,
    longitude: float | None = -80.1918,
    amenities: tuple[str, ...] = (),
    features: tuple[str, ...] = (),
    year_built: int | None = None,
    created_at: datetime = BASE_TIME,
    **overrides: Any,
) -> Property:
    """Build a listing from flat keyword arguments."""
    coordinates = (
        Coordinates(latitude=latitude, longitude=longitude)
        if latitude is not None and longitude is not None
        else None
    )
    defaults: dict[str, Any] = {
        "id": property_id,
        "title": f"Listing {property_id}",
        "price": Price(amount=price),
        "address": Address(
            street=street,
            city=city,
            state=state,
            country=country,
            postal_code=postal_code,
            coordinates=coordinates,
        ),
        "type": property_type,
        "status": status,
        "features": PropertyFeatures(
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            area=area,
            amenities=amenities,
            features=features,
            year_built=year_built,
        ),
        "created_at": created_at,
        "updated_at": created_at,
    }
    defaults.update(overrides)
    return Property(**defaults)


@pytest.fixture
def make_property() -> Callable[..., Property]:
    """Factory for listings with sensible defaults, auto-incrementing IDs and creation times."""
    _counter = 0

    def _make(**kwargs: Any) -> Property:
        nonlocal _counter
        _counter += 1
        property_id = kwargs.pop("property_id", f"test-{_counter}")
        kwargs.setdefault("created_at", BASE_TIME + timedelta(days=_counter))
        return build_property(property_id, **kwargs)

    return _make


@pytest.fixture
def catalog() -> list[Property]:
    """A small, varied catalog. Creation order is p1 (oldest) to p6 (newest)."""
    day = timedelta(days=1)
    return [
        build_property(
            "p1",
            title="Beach villa with pool",
            description="Oceanfront villa with private dock",
            price=1_500_000,
            bedrooms=4,
            bathrooms=4,
            area=400,
            property_type=PropertyType.VILLA,
            street="100 Collins Ave",
            latitude=25.7907,
            longitude=-80.1300,
            amenities=("Pool", "Gym"),
            features=("Marble floors",),
            year_built=2015,
            featured=True,
            created_at=BASE_TIME,
        ),
        build_property(
            "p2",
            title="Downtown apartment",
            description="Bright unit close to the bay",
            price=350_000,
            bedrooms=2,
            bathrooms=2,
            area=90,
            property_type=PropertyType.APARTMENT,
            street="200 Biscayne Blvd",
            latitude=25.7743,
            longitude=-80.1937,
            amenities=("Gym", "Concierge"),
            year_built=2010,
            created_at=BASE_TIME + day,
        ),
        build_property(
            "p3",
            title="Family house",
            description="Quiet street, large backyard",
            price=550_000,
            bedrooms=4,
            bathrooms=3,
            area=220,
            street="5 Orange Ave",
            city="Orlando",
            postal_code="32801",
            latitude=28.5383,
            longitude=-81.3792,
            amenities=("Garden",),
            year_built=1995,
            created_at=BASE_TIME + 2 * day,
        ),
        build_property(
            "p4",
            title="Studio condo",
            price=180_000,
            bedrooms=0,
            bathrooms=1,
            area=45,
            property_type=PropertyType.CONDO,
            street="9 Brickell Key",
            latitude=None,
            longitude=None,
            created_at=BASE_TIME + 3 * day,
        ),
        build_property(
            "p5",
            title="Office space",
            price=900_000,
            bedrooms=0,
            bathrooms=2,
            area=300,
            property_type=PropertyType.OFFICE,
            status=PropertyStatus.SOLD,
            street="1 Wall St",
            city="New York",
            state="NY",
            postal_code="10005",
            latitude=40.7069,
            longitude=-74.0113,
            year_built=1980,
            created_at=BASE_TIME + 4 * day,
        ),
        build_property(
            "p6",
            title="Townhouse near the park",
            price=420_000,
            bedrooms=3,
            bathrooms=2,
            area=160,
            property_type=PropertyType.TOWNHOUSE,
            street="12 Congress Ave",
            city="Austin",
            state="TX",
            postal_code="78701",
            latitude=30.2672,
            longitude=-97.7431,
            amenities=("Pool",),
            created_at=BASE_TIME + 5 * day,
        ),
    ]


@pytest.fixture
def memory_repository(catalog: list[Property]) -> InMemoryPropertyRepository:
    return InMemoryPropertyRepository(catalog)
