"""In-process listing store."""

from collections.abc import Iterable

from property_search.filters.criteria import matches_criteria
from property_search.filters.geo import haversine_km
from property_search.logging import get_logger
from property_search.models import Property
from property_search.repository import RepositoryPage, RepositoryQuery, sort_properties

logger = get_logger(__name__)


class InMemoryPropertyRepository:
    """PropertyRepository over a list of listings held in memory.

    Used for tests and small catalogs. Filtering uses the same
    predicate as the geo search path, so both paths agree.
    """

    def __init__(self, properties: Iterable[Property] = ()) -> None:
        self._properties: dict[str, Property] = {p.id: p for p in properties}

    def __len__(self) -> int:
        return len(self._properties)

    def add(self, prop: Property) -> None:
        """Insert or replace a listing."""
        self._properties[prop.id] = prop

    async def search(self, query: RepositoryQuery) -> RepositoryPage:
        matching = [p for p in self._properties.values() if matches_criteria(query, p)]
        ordered = sort_properties(matching, query.sort_by, query.sort_order)

        if query.limit is None:
            items = ordered[query.offset :]
        else:
            items = ordered[query.offset : query.offset + query.limit]

        logger.debug(
            "memory_search_complete",
            matching=len(ordered),
            returned=len(items),
            sort_by=query.sort_by.value,
        )
        return RepositoryPage(items=items, total=len(ordered))

    async def find_near_location(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Property]:
        """Listings with coordinates within ``radius_km``, nearest first."""
        nearby: list[tuple[float, Property]] = []
        for prop in self._properties.values():
            coords = prop.address.coordinates
            if coords is None:
                continue
            distance = haversine_km(latitude, longitude, coords.latitude, coords.longitude)
            if distance <= radius_km:
                nearby.append((distance, prop))

        nearby.sort(key=lambda pair: pair[0])
        return [prop for _, prop in nearby]
