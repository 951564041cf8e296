# This file turns list query parameters into a page request and a sort order.
# `limit` is accepted as an alias of `page_size`, and wins when both are sent.
# Sort input is `field` or `field:asc|desc`, checked against each entity's allow-list.

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False

    def __str__(self) -> str:
        return f"{self.field}:{'desc' if self.descending else 'asc'}"


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def total_pages(self, total_count: int) -> int:
        if total_count <= 0:
            return 0
        return -(-total_count // self.size)

    def metadata(self, *, total_count: int, sort: SortSpec) -> dict[str, Any]:
        """Pagination block of a list envelope."""

        return {
            "page": self.page,
            "page_size": self.size,
            "total_count": total_count,
            "total_pages": self.total_pages(total_count),
            "sort": str(sort),
        }


def page_request(
    *,
    page: int,
    page_size: int | None,
    limit: int | None,
    default_size: int,
    max_size: int,
) -> PageRequest:
    size = next((value for value in (limit, page_size) if value is not None), default_size)
    if page < 1:
        raise ValueError("page must be >= 1")
    if not 1 <= size <= max_size:
        raise ValueError(f"page_size must be between 1 and {max_size}")
    return PageRequest(page=page, size=size)


def parse_sort(raw: str | None, *, default: str, fields: Iterable[str]) -> SortSpec:
    field, _, direction = (raw or default).strip().lower().partition(":")
    allowed = sorted(fields)
    if field not in allowed:
        raise ValueError(f"Unsupported sort field '{field}'. Supported fields: {', '.join(allowed)}")
    direction = direction or "asc"
    if direction not in SORT_DIRECTIONS:
        raise ValueError("sort order must be 'asc' or 'desc'")
    return SortSpec(field=field, descending=direction == "desc")
