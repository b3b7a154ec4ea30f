"""Offset/limit pagination."""

import math
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageInfo:
    page: int
    page_size: int
    total_pages: int
    has_more: bool


def paginate(items: list[T], offset: int, limit: int) -> list[T]:
    """Return items[offset:offset + limit], empty when offset is past the end."""
    if offset < 0 or limit <= 0:
        return []
    return items[offset : offset + limit]


def page_info(total: int, offset: int, limit: int) -> PageInfo:
    """Compute page metadata for a result set.

    ``page`` is 1-indexed. A limit of 0 (count-only request) has no pages.
    """
    if limit <= 0:
        return PageInfo(page=1, page_size=0, total_pages=0, has_more=False)
    return PageInfo(
        page=offset // limit + 1,
        page_size=limit,
        total_pages=math.ceil(total / limit),
        has_more=offset + limit < total,
    )
