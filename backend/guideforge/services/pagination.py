"""Pagination bounds and page metadata for list endpoints."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def normalize(page: int, limit: int) -> tuple[int, int]:
    """Clamp out-of-range values to defaults: page < 1 -> 1, limit outside 1..100 -> 10."""
    if page < 1:
        page = DEFAULT_PAGE
    if limit < 1 or limit > MAX_LIMIT:
        limit = DEFAULT_LIMIT
    return page, limit


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the metadata needed to navigate."""

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
