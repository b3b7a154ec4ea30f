"""Listing stores implementing the PropertyRepository protocol."""

from property_search.db.memory import InMemoryPropertyRepository
from property_search.db.storage import PropertyStorage

__all__ = ["InMemoryPropertyRepository", "PropertyStorage"]
