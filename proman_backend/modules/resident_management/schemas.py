"""Resident management schemas for ProMan."""

from datetime import datetime

from pydantic import Field

from ..address_management.schemas import AddressSummary
from ..commons import CamelModel
from .models import DEFAULT_RESIDENT_TYPE, RESIDENT_TYPES

RESIDENT_TYPE_DESCRIPTION = f"Free text, commonly one of: {', '.join(RESIDENT_TYPES)}"


class ResidentBase(CamelModel):
    """Base resident schema."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=20)
    id_card: str | None = Field(None, max_length=18)
    address_id: int
    resident_type: str = Field(
        DEFAULT_RESIDENT_TYPE,
        min_length=1,
        max_length=50,
        description=RESIDENT_TYPE_DESCRIPTION,
    )


class ResidentCreate(ResidentBase):
    """Schema for creating a resident.

    ``move_in_date`` is a ``YYYY-MM-DD`` date or an ISO-8601 datetime.
    """

    move_in_date: str | None = None


class ResidentUpdate(CamelModel):
    """Schema for updating a resident. Only supplied fields change."""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=20)
    id_card: str | None = Field(None, max_length=18)
    address_id: int | None = None
    resident_type: str | None = Field(
        None, min_length=1, max_length=50, description=RESIDENT_TYPE_DESCRIPTION
    )
    move_in_date: str | None = None
    move_out_date: str | None = None
    is_active: bool | None = None


class ResidentResponse(ResidentBase):
    """Schema for resident response with its address summary."""

    id: int
    move_in_date: datetime | None = None
    move_out_date: datetime | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    address: AddressSummary | None = None


class ResidentSummary(CamelModel):
    """Compact resident embedded in expense payloads."""

    id: int
    name: str
    phone: str | None = None
