"""
Utilities module: Exceptions, pagination, health checks.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    ConflictError,
    InternalError,
)
from shared.utils.pagination import Pagination, PaginatedResponse

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InternalError",
    "Pagination",
    "PaginatedResponse",
]
