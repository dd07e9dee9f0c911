from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_records: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, request: PageRequest, total_records: int) -> "Pagination":
        total_pages = math.ceil(total_records / request.limit) if total_records else 0
        return cls(
            current_page=request.page,
            total_pages=total_pages,
            total_records=total_records,
            has_next=request.page < total_pages,
            has_prev=request.page > 1,
        )

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalRecords": self.total_records,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass(frozen=True)
class Page:
    """One page of items plus its pagination block."""

    items: list
    pagination: Pagination
