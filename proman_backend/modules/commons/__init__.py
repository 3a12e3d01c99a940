"""Common schemas and utilities shared across modules."""

from .schemas import (
    BaseResponse,
    CamelModel,
    PaginatedResponse,
    PaginationMeta,
    ok,
)

__all__ = [
    "BaseResponse",
    "CamelModel",
    "PaginatedResponse",
    "PaginationMeta",
    "ok",
]
