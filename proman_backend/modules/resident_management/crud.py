"""CRUD operations for resident management module."""

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import Resident


class ResidentCRUD(BaseCRUD[Resident]):
    search_fields = ["name", "phone", "id_card"]
    default_relationships = ["address"]


resident_crud = ResidentCRUD(Resident)


async def get_residents(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 10,
    search: str | None = None,
    address_id: int | None = None,
    resident_type: str | None = None,
    phone: str | None = None,
    is_active: bool | None = None,
) -> tuple[list[Resident], int]:
    """Get a page of residents with their addresses, newest first."""
    filters: list[ColumnElement[bool]] = []
    search_clause = resident_crud.search_condition(search)
    if search_clause is not None:
        filters.append(search_clause)
    if address_id is not None:
        filters.append(Resident.address_id == address_id)
    if resident_type:
        filters.append(Resident.resident_type == resident_type)
    if phone:
        filters.append(Resident.phone.ilike(f"%{phone}%"))
    if is_active is not None:
        filters.append(Resident.is_active == is_active)

    items = await resident_crud.select(db, filters, limit=limit, offset=skip)
    total = await resident_crud.count(db, filters)
    return items, total


async def get_resident_by_id(db: AsyncSession, resident_id: int) -> Resident | None:
    """Get a resident by ID with its address loaded."""
    return await resident_crud.get(db, resident_id)


async def get_active_residents_by_address(
    db: AsyncSession, address_id: int
) -> list[Resident]:
    """Active residents of an address, by name."""
    return await resident_crud.select(
        db,
        [Resident.address_id == address_id, Resident.is_active == True],  # noqa: E712
        order_by=[Resident.name, Resident.id],
    )
