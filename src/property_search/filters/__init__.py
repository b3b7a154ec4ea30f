"""Filters applied to candidate listings: attributes, geo radius and free text."""

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from property_search.filters.criteria import CriteriaFilter, matches_criteria  # noqa: F401
    from property_search.filters.geo import GeoFilter, haversine_km  # noqa: F401
    from property_search.filters.text import TextSearchFilter  # noqa: F401

__all__ = [
    "CriteriaFilter",
    "GeoFilter",
    "TextSearchFilter",
    "haversine_km",
    "matches_criteria",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "CriteriaFilter": (".criteria", "CriteriaFilter"),
    "GeoFilter": (".geo", "GeoFilter"),
    "TextSearchFilter": (".text", "TextSearchFilter"),
    "haversine_km": (".geo", "haversine_km"),
    "matches_criteria": (".criteria", "matches_criteria"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr = _LAZY_IMPORTS[name]
        mod = importlib.import_module(module_path, __name__)
        val = getattr(mod, attr)
        globals()[name] = val  # Cache so __getattr__ is only called once
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
