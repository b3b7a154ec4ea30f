"""Facet extraction: available filter options and applied-filter labels."""

import math

from property_search.models import AvailableFilters, Property, SearchCriteria, ValueRange


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _money(value: float | None) -> str:
    if value is None:
        return "Any"
    if float(value).is_integer():
        return f"${int(value):,}"
    return f"${value:,.2f}"


def _bound(value: float | None) -> str:
    return "Any" if value is None else _number(value)


def aggregate_available_filters(properties: list[Property]) -> AvailableFilters:
    """Collect the universe of filter options from a sample of the catalog.

    The result describes what the catalog offers, independently of the filters
    applied to the current search, so follow-up filter UIs can always show
    every option.

    Args:
        properties: Bounded sample of listings.

    Returns:
        Sorted distinct types, cities, states and amenities, plus price and
        area ranges (0/0 for an empty sample).
    """
    property_types: set[str] = set()
    cities: set[str] = set()
    states: set[str] = set()
    amenities: set[str] = set()
    min_price, max_price = math.inf, 0.0
    min_area, max_area = math.inf, 0.0

    for prop in properties:
        property_types.add(prop.type.value)
        cities.add(prop.address.city)
        states.add(prop.address.state)
        amenities.update(prop.features.amenities)

        min_price = min(min_price, prop.price.amount)
        max_price = max(max_price, prop.price.amount)
        min_area = min(min_area, prop.features.area)
        max_area = max(max_area, prop.features.area)

    return AvailableFilters(
        property_types=sorted(property_types),
        cities=sorted(cities),
        states=sorted(states),
        amenities=sorted(amenities),
        price_range=ValueRange(min=0 if min_price == math.inf else min_price, max=max_price),
        area_range=ValueRange(min=0 if min_area == math.inf else min_area, max=max_area),
    )


def build_applied_filters(criteria: SearchCriteria) -> list[str]:
    """Render every active filter as a short human-readable label."""
    applied: list[str] = []

    if criteria.min_price is not None or criteria.max_price is not None:
        applied.append(f"Price: {_money(criteria.min_price)} - {_money(criteria.max_price)}")
    if criteria.min_bedrooms is not None or criteria.max_bedrooms is not None:
        applied.append(
            f"Bedrooms: {_bound(criteria.min_bedrooms)} - {_bound(criteria.max_bedrooms)}"
        )
    if criteria.min_bathrooms is not None or criteria.max_bathrooms is not None:
        applied.append(
            f"Bathrooms: {_bound(criteria.min_bathrooms)} - {_bound(criteria.max_bathrooms)}"
        )
    if criteria.min_area is not None or criteria.max_area is not None:
        applied.append(f"Area: {_bound(criteria.min_area)} - {_bound(criteria.max_area)} m²")
    if criteria.year_built_min is not None or criteria.year_built_max is not None:
        applied.append(
            f"Year built: {_bound(criteria.year_built_min)} - {_bound(criteria.year_built_max)}"
        )
    if criteria.property_types:
        applied.append(f"Types: {', '.join(t.value for t in criteria.property_types)}")
    if criteria.statuses:
        applied.append(f"Statuses: {', '.join(s.value for s in criteria.statuses)}")
    if criteria.location:
        applied.append(f"Location: {criteria.location}")
    if criteria.city:
        applied.append(f"City: {criteria.city}")
    if criteria.state:
        applied.append(f"State: {criteria.state}")
    if criteria.country:
        applied.append(f"Country: {criteria.country}")
    if criteria.amenities:
        applied.append(f"Amenities: {', '.join(criteria.amenities)}")
    if criteria.features:
        applied.append(f"Features: {', '.join(criteria.features)}")
    if criteria.featured is not None:
        applied.append(f"Featured: {'Yes' if criteria.featured else 'No'}")
    if criteria.coordinates is not None:
        geo = criteria.coordinates
        applied.append(
            f"Near: {_number(geo.latitude)}, {_number(geo.longitude)} "
            f"({_number(geo.radius_km)}km)"
        )
    if criteria.query:
        applied.append(f'Search: "{criteria.query}"')

    return applied
