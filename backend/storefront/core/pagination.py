"""Pagination - page/limit arithmetic and the list envelope returned by catalog endpoints."""

import math
from typing import Any


def page_window(page: int, limit: int) -> tuple[int, int]:
    """Translate a 1-based page into (offset, limit). Both clamped to >= 1."""
    page = max(page, 1)
    limit = max(limit, 1)
    return (page - 1) * limit, limit


def total_pages(count: int, limit: int) -> int:
    return math.ceil((count or 0) / max(limit, 1))


def paginated(data: list[Any], count: int, page: int, limit: int) -> dict:
    return {
        "data": data,
        "count": count,
        "page": page,
        "limit": limit,
        "total_pages": total_pages(count, limit),
    }
