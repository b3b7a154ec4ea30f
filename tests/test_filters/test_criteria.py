"""Tests for attribute filtering."""

from collections.abc import Callable

import pytest

from property_search.filters.criteria import CriteriaFilter, matches_criteria
from property_search.models import Property, PropertyStatus, PropertyType, SearchCriteria
from property_search.repository import RepositoryQuery


def _ids(properties: list[Property]) -> list[str]:
    return [p.id for p in properties]


class TestMatchesCriteria:
    def test_empty_query_matches_everything(self, catalog: list[Property]) -> None:
        query = RepositoryQuery()
        assert all(matches_criteria(query, p) for p in catalog)

    def test_price_range_is_inclusive(self, make_property: Callable[..., Property]) -> None:
        query = RepositoryQuery(min_price=100_000, max_price=200_000)
        assert matches_criteria(query, make_property(price=100_000))
        assert matches_criteria(query, make_property(price=200_000))
        assert not matches_criteria(query, make_property(price=99_999))
        assert not matches_criteria(query, make_property(price=200_001))

    def test_room_ranges(self, make_property: Callable[..., Property]) -> None:
        query = RepositoryQuery(min_bedrooms=2, max_bathrooms=2)
        assert matches_criteria(query, make_property(bedrooms=2, bathrooms=2))
        assert not matches_criteria(query, make_property(bedrooms=1, bathrooms=1))
        assert not matches_criteria(query, make_property(bedrooms=3, bathrooms=3))

    def test_area_range(self, make_property: Callable[..., Property]) -> None:
        query = RepositoryQuery(min_area=50, max_area=100)
        assert matches_criteria(query, make_property(area=75))
        assert not matches_criteria(query, make_property(area=120))

    def test_unknown_year_built_fails_year_bound(
        self, make_property: Callable[..., Property]
    ) -> None:
        query = RepositoryQuery(year_built_min=1990)
        assert matches_criteria(query, make_property(year_built=2000))
        assert not matches_criteria(query, make_property(year_built=1980))
        assert not matches_criteria(query, make_property(year_built=None))

    def test_type_and_status_membership(self, make_property: Callable[..., Property]) -> None:
        query = RepositoryQuery(
            property_types=(PropertyType.VILLA, PropertyType.CONDO),
            statuses=(PropertyStatus.PUBLISHED,),
        )
        assert matches_criteria(query, make_property(property_type=PropertyType.CONDO))
        assert not matches_criteria(query, make_property(property_type=PropertyType.HOUSE))
        assert not matches_criteria(
            query,
            make_property(property_type=PropertyType.VILLA, status=PropertyStatus.SOLD),
        )

    def test_every_amenity_required(self, make_property: Callable[..., Property]) -> None:
        query = RepositoryQuery(amenities=("pool", "gym"))
        assert matches_criteria(query, make_property(amenities=("Heated Pool", "Gym")))
        assert not matches_criteria(query, make_property(amenities=("Pool",)))

    def test_every_feature_required(self, make_property: Callable[..., Property]) -> None:
        query = RepositoryQuery(features=("marble",))
        assert matches_criteria(query, make_property(features=("Marble floors",)))
        assert not matches_criteria(query, make_property(features=()))

    @pytest.mark.parametrize(
        ("wanted", "actual", "expected"),
        [(True, True, True), (True, False, False), (False, False, True), (False, True, False)],
    )
    def test_featured_flag(
        self,
        make_property: Callable[..., Property],
        wanted: bool,
        actual: bool,
        expected: bool,
    ) -> None:
        query = RepositoryQuery(featured=wanted)
        assert matches_criteria(query, make_property(featured=actual)) is expected

    def test_location_is_substring_of_full_address(
        self, make_property: Callable[..., Property]
    ) -> None:
        prop = make_property(street="1 Ocean Drive", city="Miami", postal_code="33139")
        assert matches_criteria(RepositoryQuery(location="ocean drive"), prop)
        assert matches_criteria(RepositoryQuery(location="FL 33139"), prop)
        assert not matches_criteria(RepositoryQuery(location="Orlando"), prop)

    def test_city_state_country_case_insensitive_equality(
        self, make_property: Callable[..., Property]
    ) -> None:
        prop = make_property(city="New York", state="NY", country="USA")
        assert matches_criteria(RepositoryQuery(city="new york", state="ny", country="usa"), prop)
        assert not matches_criteria(RepositoryQuery(city="York"), prop)


class TestCriteriaFilter:
    def test_accepts_search_criteria(self, catalog: list[Property]) -> None:
        criteria = SearchCriteria.create(city="Miami", min_bedrooms=2)
        result = CriteriaFilter(criteria).filter_properties(catalog)
        assert _ids(result) == ["p1", "p2"]

    def test_preserves_incoming_order(self, catalog: list[Property]) -> None:
        reversed_catalog = list(reversed(catalog))
        result = CriteriaFilter(RepositoryQuery(max_price=600_000)).filter_properties(
            reversed_catalog
        )
        assert _ids(result) == ["p6", "p4", "p3", "p2"]

    def test_no_match(self, catalog: list[Property]) -> None:
        result = CriteriaFilter(RepositoryQuery(min_price=10_000_000)).filter_properties(catalog)
        assert result == []
