"""Attribute filtering of listings against search criteria."""

from property_search.logging import get_logger
from property_search.models import Property, SearchCriteria, has_amenity, has_feature
from property_search.repository import RepositoryQuery, to_repository_query

logger = get_logger(__name__)


def _within(value: float, low: float | None, high: float | None) -> bool:
    if low is not None and value < low:
        return False
    return not (high is not None and value > high)


def _same_text(expected: str | None, actual: str) -> bool:
    return expected is None or expected.lower() == actual.lower()


def matches_criteria(query: RepositoryQuery, prop: Property) -> bool:
    """Check a listing against every non-geo, non-text constraint.

    Unset constraints always match. A listing with an unknown build year
    never satisfies a year-built bound.
    """
    features = prop.features

    if not _within(prop.price.amount, query.min_price, query.max_price):
        return False
    if not _within(features.bedrooms, query.min_bedrooms, query.max_bedrooms):
        return False
    if not _within(features.bathrooms, query.min_bathrooms, query.max_bathrooms):
        return False
    if not _within(features.area, query.min_area, query.max_area):
        return False

    if query.year_built_min is not None or query.year_built_max is not None:
        if features.year_built is None:
            return False
        if not _within(features.year_built, query.year_built_min, query.year_built_max):
            return False

    if query.property_types and prop.type not in query.property_types:
        return False
    if query.statuses and prop.status not in query.statuses:
        return False
    if not all(has_amenity(prop, a) for a in query.amenities):
        return False
    if not all(has_feature(prop, f) for f in query.features):
        return False
    if query.featured is not None and prop.featured != query.featured:
        return False

    address = prop.address
    if query.location and query.location.lower() not in address.full_address().lower():
        return False
    return (
        _same_text(query.city, address.city)
        and _same_text(query.state, address.state)
        and _same_text(query.country, address.country)
    )


class CriteriaFilter:
    """Filter listings by price, rooms, area, type, status, amenities and location."""

    def __init__(self, criteria: SearchCriteria | RepositoryQuery) -> None:
        """Initialize the criteria filter.

        Args:
            criteria: Search criteria, or the repository-level filter parameters
                already derived from them.
        """
        if isinstance(criteria, SearchCriteria):
            criteria = to_repository_query(criteria)
        self.query = criteria

    def filter_properties(self, properties: list[Property]) -> list[Property]:
        """Filter properties by criteria.

        Args:
            properties: List of properties to filter.

        Returns:
            List of properties matching the criteria, in their original order.
        """
        matching = [p for p in properties if matches_criteria(self.query, p)]

        logger.info(
            "criteria_filter_complete",
            total_properties=len(properties),
            matching=len(matching),
            min_price=self.query.min_price,
            max_price=self.query.max_price,
            min_bedrooms=self.query.min_bedrooms,
            max_bedrooms=self.query.max_bedrooms,
        )

        return matching
