"""Search result models, serialized with camelCase keys."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from property_search.models.property import (
    Property,
    age_years,
    is_family_friendly,
    is_luxury,
    price_per_sqft,
    price_per_sqm,
)


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ResultCoordinates(_ResultModel):
    latitude: float
    longitude: float


class ResultAddress(_ResultModel):
    street: str
    city: str
    state: str
    country: str
    postal_code: str | None = None
    coordinates: ResultCoordinates | None = None


class ResultParking(_ResultModel):
    spaces: int
    type: str


class ResultFeatures(_ResultModel):
    bedrooms: int
    bathrooms: int
    area: float
    amenities: list[str] = []
    features: list[str] = []
    parking: ResultParking | None = None
    year_built: int | None = None
    lot_size: float | None = None


class ResultItem(_ResultModel):
    """Flattened, serialization-ready projection of a listing."""

    id: str
    title: str
    description: str
    price: float
    currency: str
    address: ResultAddress
    type: str
    status: str
    features: ResultFeatures
    images: list[str] = []
    featured: bool
    created_at: datetime
    updated_at: datetime
    price_per_sqm: int
    price_per_sqft: int
    is_luxury: bool
    is_family_friendly: bool
    age: int | None = None

    @classmethod
    def from_property(cls, prop: Property) -> "ResultItem":
        address = prop.address
        features = prop.features
        return cls(
            id=prop.id,
            title=prop.title,
            description=prop.description,
            price=prop.price.amount,
            currency=prop.price.currency,
            address=ResultAddress(
                street=address.street,
                city=address.city,
                state=address.state,
                country=address.country,
                postal_code=address.postal_code,
                coordinates=(
                    ResultCoordinates(
                        latitude=address.coordinates.latitude,
                        longitude=address.coordinates.longitude,
                    )
                    if address.coordinates
                    else None
                ),
            ),
            type=prop.type.value,
            status=prop.status.value,
            features=ResultFeatures(
                bedrooms=features.bedrooms,
                bathrooms=features.bathrooms,
                area=features.area,
                amenities=list(features.amenities),
                features=list(features.features),
                parking=(
                    ResultParking(spaces=features.parking.spaces, type=features.parking.type)
                    if features.parking
                    else None
                ),
                year_built=features.year_built,
                lot_size=features.lot_size,
            ),
            images=list(prop.images),
            featured=prop.featured,
            created_at=prop.created_at,
            updated_at=prop.updated_at,
            price_per_sqm=price_per_sqm(prop),
            price_per_sqft=price_per_sqft(prop),
            is_luxury=is_luxury(prop),
            is_family_friendly=is_family_friendly(prop),
            age=age_years(prop),
        )


class ValueRange(_ResultModel):
    min: float = 0
    max: float = 0


class AvailableFilters(_ResultModel):
    """Universe of filter options observed in the catalog sample."""

    property_types: list[str] = []
    cities: list[str] = []
    states: list[str] = []
    amenities: list[str] = []
    price_range: ValueRange = Field(default_factory=ValueRange)
    area_range: ValueRange = Field(default_factory=ValueRange)


class Facets(_ResultModel):
    applied: list[str] = []
    available: AvailableFilters = Field(default_factory=AvailableFilters)


class SearchStatistics(_ResultModel):
    """Aggregates over the returned page. All values are zero for an empty page."""

    average_price: int = 0
    median_price: int = 0
    average_price_per_area: int = 0
    total_listings: int = 0
    by_type: dict[str, int] = {}
    by_status: dict[str, int] = {}


class SearchResult(_ResultModel):
    """One page of search results plus facets and statistics."""

    items: list[ResultItem]
    total: int
    has_more: bool
    page: int
    page_size: int
    total_pages: int
    facets: Facets = Field(default_factory=Facets)
    statistics: SearchStatistics | None = None

    @property
    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible structure (ISO-8601 timestamps, camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
