"""
Standardized page/limit pagination for list commands.

Every paginated reply has the same envelope:

    {"list": [...], "meta": {"total": 42, "page": 2, "last_page": 5}}

Usage:
    pagination = Pagination.from_input(parse(PaginationInput, data))
    items = repo.find_all(limit=pagination.limit, offset=pagination.offset)
    return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()
"""

import math
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from shared.config.settings import settings
from shared.config.constants import Limits


class PaginationInput(BaseModel):
    """Payload fields accepted by list and search commands."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=Limits.DEFAULT_PAGE_SIZE, ge=1, le=Limits.MAX_PAGE_SIZE)


@dataclass
class Pagination:
    """
    Pagination parameters with validation.

    Attributes:
        page: 1-indexed page number
        limit: Maximum items per page (1 to max_limit)
        max_limit: Maximum allowed limit
    """

    page: int = 1
    limit: int = Limits.DEFAULT_PAGE_SIZE
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        """Validate and normalize values."""
        self.max_limit = min(self.max_limit, settings.max_page_size)
        self.limit = min(max(1, self.limit), self.max_limit)
        self.page = max(1, self.page)

    @classmethod
    def from_input(cls, data: PaginationInput) -> "Pagination":
        return cls(page=data.page, limit=data.limit)

    @property
    def offset(self) -> int:
        """Number of items to skip."""
        return (self.page - 1) * self.limit

    def last_page(self, total: int) -> int:
        """Last page number for a total; zero when there is nothing to page."""
        return math.ceil(total / self.limit)

    def to_meta(self, total: int) -> dict[str, int]:
        return {
            "total": total,
            "page": self.page,
            "last_page": self.last_page(total),
        }


@dataclass
class PaginatedResponse:
    """
    Wrapper for paginated replies.

    Usage:
        items = repo.find_all(limit=pagination.limit, offset=pagination.offset)
        total = repo.count()
        return PaginatedResponse(items=items, pagination=pagination, total=total)
    """

    items: list[Any]
    pagination: Pagination
    total: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to reply dictionary."""
        return {
            "list": self.items,
            "meta": self.pagination.to_meta(self.total),
        }

    @property
    def has_more(self) -> bool:
        """Check if there are more items."""
        return self.pagination.offset + len(self.items) < self.total
