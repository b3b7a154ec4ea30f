"""Build SearchCriteria from raw form or query-string values."""

import math
from collections.abc import Mapping
from typing import Any, Final
from urllib.parse import parse_qs

from property_search.logging import get_logger
from property_search.models import DEFAULT_LIMIT, SearchCriteria

logger = get_logger(__name__)

# Raw key -> SearchCriteria field
_FLOAT_FIELDS: Final = {
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "minArea": "min_area",
    "maxArea": "max_area",
}
_INT_FIELDS: Final = {
    "minBedrooms": "min_bedrooms",
    "maxBedrooms": "max_bedrooms",
    "minBathrooms": "min_bathrooms",
    "maxBathrooms": "max_bathrooms",
    "yearBuiltMin": "year_built_min",
    "yearBuiltMax": "year_built_max",
}
_TEXT_FIELDS: Final = {
    "location": "location",
    "city": "city",
    "state": "state",
    "country": "country",
    "query": "query",
}
_LIST_FIELDS: Final = {
    "propertyTypes": "property_types",
    "statuses": "statuses",
    "amenities": "amenities",
    "features": "features",
}
# Single-value shortcuts used by simple search forms
_ALIASES: Final = {
    "bedrooms": "min_bedrooms",
    "bathrooms": "min_bathrooms",
}


def _parse_optional_int(value: str | None) -> int | None:
    """Parse a string to int, returning None for empty/whitespace/non-numeric values."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def _parse_optional_float(value: str | None) -> float | None:
    """Parse a decimal string, returning None for empty, non-numeric or non-finite values."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        parsed = float(value)
    except (ValueError, TypeError):
        return None
    return parsed if math.isfinite(parsed) else None


def _values(source: Mapping[str, Any], key: str) -> list[str]:
    """Every raw value submitted under ``key``."""
    getlist = getattr(source, "getlist", None)
    if callable(getlist):
        return [str(v) for v in getlist(key) if v is not None]
    raw = source.get(key)
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(v) for v in raw if v is not None]
    return [str(raw)]


def _first(source: Mapping[str, Any], key: str) -> str | None:
    """First non-blank value under ``key``, stripped."""
    for value in _values(source, key):
        if value.strip():
            return value.strip()
    return None


def _split_list(source: Mapping[str, Any], key: str) -> list[str]:
    """Comma-separated or repeated values, trimmed, without empties."""
    items: list[str] = []
    for value in _values(source, key):
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def parse_criteria(
    source: Mapping[str, Any], *, default_limit: int = DEFAULT_LIMIT
) -> SearchCriteria:
    """Coerce raw key/value input into validated search criteria.

    Numeric values that are missing or unparsable are treated as not
    specified. Geo search is only activated when ``lat``, ``lng`` and
    ``radius`` are all present; partial geo input is ignored.

    Args:
        source: Mapping of raw keys to a string or a list of strings. Multi-dicts
            exposing ``getlist`` (form data, query params) are supported.
        default_limit: Page size when ``limit`` is absent or unparsable.

    Returns:
        Validated, immutable criteria.

    Raises:
        CriteriaValidationError: If the parsed values violate a constraint.
    """
    data: dict[str, Any] = {}

    for key, field in _FLOAT_FIELDS.items():
        parsed_float = _parse_optional_float(_first(source, key))
        if parsed_float is not None:
            data[field] = parsed_float

    for key, field in _INT_FIELDS.items():
        parsed_int = _parse_optional_int(_first(source, key))
        if parsed_int is not None:
            data[field] = parsed_int

    for key, field in _ALIASES.items():
        parsed_int = _parse_optional_int(_first(source, key))
        if parsed_int is not None:
            data[field] = parsed_int

    for key, field in _TEXT_FIELDS.items():
        text = _first(source, key)
        if text:
            data[field] = text

    for key, field in _LIST_FIELDS.items():
        items = _split_list(source, key)
        if items:
            data[field] = items

    single_type = _first(source, "propertyType")
    if single_type:
        data["property_types"] = [single_type]

    featured = _first(source, "featured")
    if featured:
        data["featured"] = featured.lower() == "true"

    raw_geo = {key: _first(source, key) for key in ("lat", "lng", "radius")}
    lat, lng, radius = (_parse_optional_float(raw_geo[k]) for k in ("lat", "lng", "radius"))
    if lat is not None and lng is not None and radius is not None:
        data["coordinates"] = {"latitude": lat, "longitude": lng, "radius_km": radius}
    elif any(v is not None for v in raw_geo.values()):
        logger.debug("partial_geo_input_ignored", **raw_geo)

    limit = _parse_optional_int(_first(source, "limit"))
    data["limit"] = default_limit if limit is None else limit
    offset = _parse_optional_int(_first(source, "offset"))
    if offset is not None:
        data["offset"] = offset

    sort_by = _first(source, "sortBy")
    if sort_by:
        data["sort_by"] = sort_by
    sort_order = _first(source, "sortOrder")
    if sort_order:
        data["sort_order"] = sort_order.lower()

    return SearchCriteria.create(**data)


def parse_form_data(
    form: Mapping[str, Any], *, default_limit: int = DEFAULT_LIMIT
) -> SearchCriteria:
    """Criteria from a submitted search form."""
    return parse_criteria(form, default_limit=default_limit)


def parse_query_params(
    params: str | Mapping[str, Any], *, default_limit: int = DEFAULT_LIMIT
) -> SearchCriteria:
    """Criteria from URL query parameters, given parsed or as a raw query string."""
    if isinstance(params, str):
        params = parse_qs(params.lstrip("?"))
    return parse_criteria(params, default_limit=default_limit)
