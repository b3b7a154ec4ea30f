"""Pydantic models for listings, search criteria and search results."""

from property_search.models.criteria import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    CriteriaValidationError,
    GeoQuery,
    SearchCriteria,
    SortField,
    SortOrder,
)
from property_search.models.property import (
    Address,
    Coordinates,
    Parking,
    Price,
    Property,
    PropertyFeatures,
    PropertyStatus,
    PropertyType,
    age_years,
    has_amenity,
    has_feature,
    is_family_friendly,
    is_luxury,
    price_per_sqft,
    price_per_sqm,
)
from property_search.models.results import (
    AvailableFilters,
    Facets,
    ResultItem,
    SearchResult,
    SearchStatistics,
    ValueRange,
)

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "Address",
    "AvailableFilters",
    "Coordinates",
    "CriteriaValidationError",
    "Facets",
    "GeoQuery",
    "Parking",
    "Price",
    "Property",
    "PropertyFeatures",
    "PropertyStatus",
    "PropertyType",
    "ResultItem",
    "SearchCriteria",
    "SearchResult",
    "SearchStatistics",
    "SortField",
    "SortOrder",
    "ValueRange",
    "age_years",
    "has_amenity",
    "has_feature",
    "is_family_friendly",
    "is_luxury",
    "price_per_sqft",
    "price_per_sqm",
]
