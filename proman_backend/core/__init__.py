"""Core infrastructure for ProMan backend."""

from .base_crud import BaseCRUD
from .exceptions import (
    DatabaseError,
    NotFoundError,
    ProManException,
    ValidationError,
    database_operation,
)
from .pagination import (
    calculate_offset,
    calculate_total_pages,
    normalize_pagination_params,
)

__all__ = [
    "BaseCRUD",
    "ProManException",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",
    "database_operation",
    "normalize_pagination_params",
    "calculate_offset",
    "calculate_total_pages",
]
