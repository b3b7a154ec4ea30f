"""Free-text search over listing text.

Matching is conjunctive and binary: every whitespace-separated token of the
query must occur, case-insensitively, somewhere in the listing's searchable
text. There is no relevance ranking; the filter keeps the incoming order.
"""

from property_search.logging import get_logger
from property_search.models import Property

logger = get_logger(__name__)


def tokenize_query(query: str) -> list[str]:
    """Split a query into lower-cased tokens, dropping empty ones."""
    return query.lower().split()


def searchable_text(prop: Property) -> str:
    """Lower-cased concatenation of every text field a query can match."""
    parts = [
        prop.title,
        prop.description,
        prop.address.full_address(),
        prop.type.value,
        *prop.features.amenities,
        *prop.features.features,
    ]
    return " ".join(parts).lower()


class TextSearchFilter:
    """Filter listings by a free-text query."""

    def __init__(self, query: str) -> None:
        self.query = query.strip()
        self.tokens = tokenize_query(self.query)

    def matches(self, prop: Property) -> bool:
        text = searchable_text(prop)
        return all(token in text for token in self.tokens)

    def filter_properties(self, properties: list[Property]) -> list[Property]:
        """Filter properties by query.

        Args:
            properties: Candidate listings.

        Returns:
            Listings containing every query token, in their original order.
        """
        if not self.tokens:
            return list(properties)

        matching = [p for p in properties if self.matches(p)]

        logger.info(
            "text_search_complete",
            query=self.query,
            tokens=len(self.tokens),
            total_properties=len(properties),
            matching=len(matching),
        )

        return matching
