"""
Shared pagination utilities for consistent pagination across all modules.
"""

import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def normalize_pagination_params(
    page: int | None, limit: int | None, max_limit: int = MAX_LIMIT
) -> tuple[int, int]:
    """
    Clamp pagination parameters into their valid ranges.

    Args:
        page: Page number (1-based); values below 1 become 1
        limit: Number of items per page; clamped to [1, max_limit]
        max_limit: Upper bound for the page size

    Returns:
        Tuple of (page, limit)
    """
    page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_LIMIT if limit is None else limit
    return max(1, page), min(max_limit, max(1, limit))


def calculate_offset(page: int, limit: int) -> int:
    """
    Calculate database offset for pagination.

    Args:
        page: Page number (1-based)
        limit: Number of items per page

    Returns:
        Database offset (0-based)
    """
    return (page - 1) * limit


def calculate_total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` items, ``limit`` at a time."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)
