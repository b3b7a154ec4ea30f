"""Search orchestration: one request in, one SearchResult out.

The pipeline is validate -> fetch candidates -> filter -> paginate ->
facets and statistics (concurrently) -> assemble. The repository is passed
in explicitly; nothing here holds state between requests.
"""

import asyncio
import time
from typing import Final

from property_search.facets import aggregate_available_filters, build_applied_filters
from property_search.filters.criteria import CriteriaFilter
from property_search.filters.geo import GeoFilter
from property_search.filters.text import TextSearchFilter
from property_search.logging import get_logger
from property_search.models import (
    AvailableFilters,
    CriteriaValidationError,
    Facets,
    Property,
    ResultItem,
    SearchCriteria,
    SearchResult,
    SearchStatistics,
)
from property_search.pagination import page_info, paginate
from property_search.repository import PropertyRepository, RepositoryQuery, to_repository_query
from property_search.stats import compute_statistics

logger = get_logger(__name__)

FACET_SAMPLE_SIZE: Final = 1000


class SearchFailureError(Exception):
    """The search could not be completed for reasons other than invalid input."""

    public_message: Final = "Search is currently unavailable. Please try again later."


def validate_criteria(criteria: SearchCriteria) -> SearchCriteria:
    """Re-check every criteria invariant.

    Criteria built through ``model_construct`` skip validation; this catches them.

    Raises:
        CriteriaValidationError: If any invariant is violated.
    """
    return SearchCriteria.create(**criteria.model_dump())


async def _fetch_matches(
    criteria: SearchCriteria, repository: PropertyRepository
) -> tuple[list[Property], int]:
    """Return the listings for the requested page and the total match count.

    Text search always runs before pagination. When a query is present the
    standard path asks the repository for the whole sorted match set so that
    ``total`` and the page boundaries reflect the text-filtered set, the same
    as on the geo path.
    """
    text_filter = TextSearchFilter(criteria.query) if criteria.query else None

    if criteria.coordinates is not None:
        geo = criteria.coordinates
        nearby = await repository.find_near_location(geo.latitude, geo.longitude, geo.radius_km)
        matches = GeoFilter(geo).filter_properties(list(nearby))
        matches = CriteriaFilter(criteria).filter_properties(matches)
    elif text_filter is not None:
        everything = await repository.search(to_repository_query(criteria, paginate=False))
        matches = everything.items
    else:
        page = await repository.search(to_repository_query(criteria))
        return list(page.items), page.total

    if text_filter is not None:
        matches = text_filter.filter_properties(matches)

    return paginate(matches, criteria.offset, criteria.limit), len(matches)


async def _available_filters(
    repository: PropertyRepository, sample_size: int
) -> AvailableFilters:
    """Facet options from a bounded catalog sample; empty if the sample fetch fails."""
    try:
        sample = await repository.search(RepositoryQuery(limit=sample_size))
        return aggregate_available_filters(sample.items)
    except Exception:
        logger.error("facet_aggregation_failed", sample_size=sample_size, exc_info=True)
        return AvailableFilters()


async def _statistics(properties: list[Property]) -> SearchStatistics:
    try:
        return compute_statistics(properties)
    except Exception:
        logger.error("statistics_failed", listings=len(properties), exc_info=True)
        return SearchStatistics()


async def search_properties(
    criteria: SearchCriteria,
    repository: PropertyRepository,
    *,
    facet_sample_size: int = FACET_SAMPLE_SIZE,
) -> SearchResult:
    """Run one property search.

    Args:
        criteria: Search request.
        repository: Listing store to query.
        facet_sample_size: Number of listings sampled for the available-filter facets.

    Returns:
        The requested page with facets and statistics for that page.

    Raises:
        CriteriaValidationError: If the criteria are invalid (never wrapped).
        SearchFailureError: If the repository or an internal step fails.
    """
    criteria = validate_criteria(criteria)
    started = time.monotonic()

    try:
        items, total = await _fetch_matches(criteria, repository)

        available, statistics = await asyncio.gather(
            _available_filters(repository, facet_sample_size),
            _statistics(items),
        )

        info = page_info(total, criteria.offset, criteria.limit)
        result = SearchResult(
            items=[ResultItem.from_property(p) for p in items],
            total=total,
            has_more=info.has_more,
            page=info.page,
            page_size=info.page_size,
            total_pages=info.total_pages,
            facets=Facets(applied=build_applied_filters(criteria), available=available),
            statistics=statistics,
        )
    except CriteriaValidationError:
        raise
    except Exception as e:
        logger.error("search_failed", error=str(e), exc_info=True)
        raise SearchFailureError(f"Property search failed: {e}") from e

    logger.info(
        "search_complete",
        geo=criteria.coordinates is not None,
        query=criteria.query,
        total=result.total,
        returned=len(result.items),
        page=result.page,
        elapsed_ms=round((time.monotonic() - started) * 1000),
    )

    return result
