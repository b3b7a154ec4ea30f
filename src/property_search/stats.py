"""Aggregate statistics over a page of listings."""

from collections import Counter

from property_search.models import Property, SearchStatistics, price_per_sqm


def compute_statistics(properties: list[Property]) -> SearchStatistics:
    """Summarize prices and composition of the listings shown to the caller.

    The median is the upper median: for an even count the element at
    ``n // 2`` of the sorted prices is used, not the mean of the middle pair.
    All values are rounded to integers.

    Args:
        properties: The final page of listings.

    Returns:
        Statistics, all zero for an empty list.
    """
    if not properties:
        return SearchStatistics()

    prices = sorted(p.price.amount for p in properties)
    average_price = sum(prices) / len(prices)
    median_price = prices[len(prices) // 2]

    per_area = [v for v in (price_per_sqm(p) for p in properties) if v > 0]
    average_per_area = sum(per_area) / len(per_area) if per_area else 0

    by_type = Counter(p.type.value for p in properties)
    by_status = Counter(p.status.value for p in properties)

    return SearchStatistics(
        average_price=round(average_price),
        median_price=round(median_price),
        average_price_per_area=round(average_per_area),
        total_listings=len(properties),
        by_type=dict(by_type),
        by_status=dict(by_status),
    )
