"""Contract between the search engine and the listing store."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, Protocol

from pydantic import BaseModel, ConfigDict

from property_search.models import (
    Property,
    PropertyStatus,
    PropertyType,
    SearchCriteria,
    SortField,
    SortOrder,
)


class RepositoryQuery(BaseModel):
    """Repository-native filter parameters.

    Mirrors the non-geo, non-text part of SearchCriteria. ``limit=None``
    asks for the complete, sorted match set.
    """

    model_config = ConfigDict(frozen=True)

    min_price: float | None = None
    max_price: float | None = None
    min_bedrooms: int | None = None
    max_bedrooms: int | None = None
    min_bathrooms: int | None = None
    max_bathrooms: int | None = None
    min_area: float | None = None
    max_area: float | None = None
    year_built_min: int | None = None
    year_built_max: int | None = None
    property_types: tuple[PropertyType, ...] = ()
    statuses: tuple[PropertyStatus, ...] = ()
    amenities: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    location: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    featured: bool | None = None

    limit: int | None = None
    offset: int = 0
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC


@dataclass(frozen=True, slots=True)
class RepositoryPage:
    items: list[Property]
    total: int  # Matches before pagination


class PropertyRepository(Protocol):
    """Listing store consumed by the search engine."""

    async def search(self, query: RepositoryQuery) -> RepositoryPage:
        """Return one sorted page of listings matching every filter in ``query``."""
        ...

    async def find_near_location(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Property]:
        """Return every listing within ``radius_km`` of the point, unpaginated."""
        ...


def to_repository_query(criteria: SearchCriteria, *, paginate: bool = True) -> RepositoryQuery:
    """Map search criteria to repository filter parameters.

    Args:
        criteria: Validated search criteria.
        paginate: If False, request the whole match set (limit and offset dropped).
    """
    data = criteria.model_dump(exclude={"coordinates", "query", "limit", "offset"})
    if paginate:
        data.update(limit=criteria.limit, offset=criteria.offset)
    return RepositoryQuery(**data)


_SORT_KEYS: Final[dict[SortField, Callable[[Property], Any]]] = {
    SortField.PRICE: lambda p: p.price.amount,
    SortField.AREA: lambda p: p.features.area,
    SortField.BEDROOMS: lambda p: p.features.bedrooms,
    SortField.BATHROOMS: lambda p: p.features.bathrooms,
    SortField.CREATED_AT: lambda p: p.created_at,
    SortField.UPDATED_AT: lambda p: p.updated_at,
}


def sort_properties(
    properties: list[Property], sort_by: SortField, sort_order: SortOrder
) -> list[Property]:
    """Stable sort of listings by one field."""
    return sorted(
        properties,
        key=_SORT_KEYS[sort_by],
        reverse=sort_order == SortOrder.DESC,
    )
