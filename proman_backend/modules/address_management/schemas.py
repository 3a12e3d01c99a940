"""Address management schemas for ProMan."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from ..commons import CamelModel
from .models import AddressType

# ----- Address Schemas -----


class AddressBase(CamelModel):
    """Fields shared by address requests and responses."""

    name: str = Field(..., min_length=1, max_length=255)
    type: AddressType
    parent_id: int | None = Field(None, ge=0)
    code: str | None = Field(None, max_length=100)
    description: str | None = None
    area: Decimal | None = Field(None, max_digits=10, decimal_places=2)


class AddressCreate(AddressBase):
    """Schema for creating an address."""

    pass


class AddressUpdate(CamelModel):
    """Schema for updating an address. Only supplied fields change."""

    name: str | None = Field(None, min_length=1, max_length=255)
    type: AddressType | None = None
    parent_id: int | None = Field(None, ge=0)
    code: str | None = Field(None, max_length=100)
    description: str | None = None
    area: Decimal | None = Field(None, max_digits=10, decimal_places=2)
    is_active: bool | None = None


class AddressResponse(AddressBase):
    """Schema for address response."""

    id: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AddressSummary(CamelModel):
    """Compact address embedded in resident and expense payloads."""

    id: int
    name: str
    type: AddressType
    code: str | None = None


class AddressTreeNode(CamelModel):
    """An address with its active descendants nested under ``children``."""

    id: int
    name: str
    type: AddressType
    parent_id: int | None = None
    code: str | None = None
    description: str | None = None
    area: Decimal | None = None
    is_active: bool
    children: list[AddressTreeNode] = Field(default_factory=list)


AddressTreeNode.model_rebuild()
