"""Great-circle distance and radius filtering."""

import math
from typing import Final

from property_search.logging import get_logger
from property_search.models import GeoQuery, Property

logger = get_logger(__name__)

EARTH_RADIUS_KM: Final = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two coordinates in kilometers.

    Args:
        lat1, lon1: First coordinate.
        lat2, lon2: Second coordinate.

    Returns:
        Distance in kilometers over a spherical earth.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_to(query: GeoQuery, prop: Property) -> float | None:
    """Distance from the query point to a listing, or None when it has no coordinates."""
    coords = prop.address.coordinates
    if coords is None:
        return None
    return haversine_km(query.latitude, query.longitude, coords.latitude, coords.longitude)


class GeoFilter:
    """Keep listings inside a radius around a reference point.

    Incoming order is preserved; ranking by proximity is left to the
    repository that produced the candidates.
    """

    def __init__(self, query: GeoQuery) -> None:
        self.query = query

    def is_within_radius(self, prop: Property) -> bool:
        distance = distance_to(self.query, prop)
        return distance is not None and distance <= self.query.radius_km

    def filter_properties(self, properties: list[Property]) -> list[Property]:
        """Filter properties by distance.

        Args:
            properties: Candidate listings.

        Returns:
            Listings with coordinates that lie within the radius.
        """
        within = [p for p in properties if self.is_within_radius(p)]

        logger.debug(
            "geo_filter_complete",
            total_properties=len(properties),
            within_radius=len(within),
            latitude=self.query.latitude,
            longitude=self.query.longitude,
            radius_km=self.query.radius_km,
        )

        return within
