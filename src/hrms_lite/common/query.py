from __future__ import annotations

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .pagination import PageRequest
from .validators import Field, int_range


def pagination_fields() -> dict[str, Field]:
    return {
        "page": Field(
            rules=[int_range("Page must be a positive integer", min_value=1)],
            convert=int,
            default=DEFAULT_PAGE,
        ),
        "limit": Field(
            rules=[int_range(f"Limit must be between 1 and {MAX_PAGE_LIMIT}", min_value=1, max_value=MAX_PAGE_LIMIT)],
            convert=int,
            default=DEFAULT_PAGE_LIMIT,
        ),
    }


def page_request(values: dict) -> PageRequest:
    return PageRequest(page=int(values.get("page", DEFAULT_PAGE)), limit=int(values.get("limit", DEFAULT_PAGE_LIMIT)))
