"""Common schemas shared across all modules."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ...core.pagination import calculate_total_pages

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class BaseResponse(CamelModel, Generic[T]):
    """Uniform response envelope used by every endpoint, errors included."""

    code: int = Field(default=200, description="Status code, 200 on success")
    msg: str = Field(default="Success", description="Human-readable message")
    data: T | None = Field(default=None, description="Response data")


def ok(data: T | None = None, msg: str = "Success", code: int = 200) -> BaseResponse[T]:
    """Wrap a successful result in the response envelope."""
    return BaseResponse(code=code, msg=msg, data=data)


class PaginationMeta(CamelModel):
    """Paging metadata returned next to a page of items."""

    page: int = Field(default=1, description="Current page number")
    limit: int = Field(default=10, description="Items per page")
    total: int = Field(default=0, description="Total number of items")
    total_pages: int = Field(default=0, description="Total number of pages")


class PaginatedResponse(CamelModel, Generic[T]):
    """Paginated response schema."""

    items: list[T] = Field(default_factory=list, description="List of items")
    pagination: PaginationMeta = Field(default_factory=PaginationMeta)

    @classmethod
    def from_items(cls, items: list[T], total: int, page: int, limit: int):
        return cls(
            items=items,
            pagination=PaginationMeta(
                page=page,
                limit=limit,
                total=total,
                total_pages=calculate_total_pages(total, limit),
            ),
        )
