"""CRUD operations for address management module."""

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import Address, AddressType


class AddressCRUD(BaseCRUD[Address]):
    search_fields = ["name"]


address_crud = AddressCRUD(Address)


def address_filters(
    search: str | None = None,
    type: AddressType | None = None,
    parent_id: int | None = None,
    is_active: bool | None = None,
) -> list[ColumnElement[bool]]:
    """Build list predicates. ``parent_id == 0`` selects root nodes."""
    filters: list[ColumnElement[bool]] = []
    search_clause = address_crud.search_condition(search)
    if search_clause is not None:
        filters.append(search_clause)
    if type is not None:
        filters.append(Address.type == type)
    if parent_id is not None:
        if parent_id == 0:
            filters.append(Address.parent_id.is_(None))
        else:
            filters.append(Address.parent_id == parent_id)
    if is_active is not None:
        filters.append(Address.is_active == is_active)
    return filters


async def get_addresses(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 10,
    search: str | None = None,
    type: AddressType | None = None,
    parent_id: int | None = None,
    is_active: bool | None = None,
) -> tuple[list[Address], int]:
    """Get a page of addresses, newest first, with the unpaged total."""
    filters = address_filters(search, type, parent_id, is_active)
    items = await address_crud.select(db, filters, limit=limit, offset=skip)
    total = await address_crud.count(db, filters)
    return items, total


async def get_address_by_id(db: AsyncSession, address_id: int) -> Address | None:
    """Get an address by ID, active or not."""
    return await address_crud.get(db, address_id)


async def get_active_children(
    db: AsyncSession,
    parent_id: int | None,
    type: AddressType | None = None,
) -> list[Address]:
    """Active addresses directly under ``parent_id`` (roots when None), by name."""
    filters = [Address.is_active == True]  # noqa: E712
    if parent_id is None:
        filters.append(Address.parent_id.is_(None))
    else:
        filters.append(Address.parent_id == parent_id)
    if type is not None:
        filters.append(Address.type == type)
    return await address_crud.select(
        db, filters, order_by=[Address.name, Address.id]
    )


async def get_all_active(db: AsyncSession) -> list[Address]:
    """Every active address, by name."""
    return await address_crud.select(
        db,
        [Address.is_active == True],  # noqa: E712
        order_by=[Address.name, Address.id],
    )


async def has_children(db: AsyncSession, address_id: int) -> bool:
    """Whether any address, active or not, names this one as parent."""
    return await address_crud.exists(db, parent_id=address_id)


async def count_addresses(db: AsyncSession) -> int:
    return await address_crud.count(db)
