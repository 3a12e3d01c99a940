"""Address hierarchy business logic services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError, database_operation
from ...core.logging import get_logger
from ...core.pagination import calculate_offset, normalize_pagination_params
from ...core.utils import drop_null_fields, sanitize_string
from ..commons import PaginatedResponse
from . import crud
from .models import Address, AddressType
from .schemas import AddressCreate, AddressResponse, AddressTreeNode, AddressUpdate

logger = get_logger(__name__)


def _tree_node(address: Address, children: list[AddressTreeNode]) -> AddressTreeNode:
    return AddressTreeNode(
        id=address.id,
        name=address.name,
        type=address.type,
        parent_id=address.parent_id,
        code=address.code,
        description=address.description,
        area=address.area,
        is_active=address.is_active,
        children=children,
    )


async def _require_address(db: AsyncSession, address_id: int) -> Address:
    address = await crud.get_address_by_id(db, address_id)
    if not address:
        raise NotFoundError(f"Address with ID {address_id} not found")
    return address


async def _validate_parent(db: AsyncSession, parent_id: int) -> None:
    if not await crud.address_crud.exists(db, id=parent_id):
        raise ValidationError("Parent address not found", field="parentId", value=parent_id)


@database_operation("Failed to list addresses")
async def list_addresses(
    db: AsyncSession,
    search: str | None = None,
    type: AddressType | None = None,
    parent_id: int | None = None,
    is_active: bool | None = None,
    page: int = 1,
    limit: int = 10,
) -> PaginatedResponse[AddressResponse]:
    """Get a page of addresses, newest first.

    ``parent_id == 0`` restricts the page to root addresses.
    """
    page, limit = normalize_pagination_params(page, limit)
    addresses, total = await crud.get_addresses(
        db,
        skip=calculate_offset(page, limit),
        limit=limit,
        search=sanitize_string(search),
        type=type,
        parent_id=parent_id,
        is_active=is_active,
    )
    return PaginatedResponse[AddressResponse].from_items(
        items=[AddressResponse.model_validate(a) for a in addresses],
        total=total,
        page=page,
        limit=limit,
    )


async def _build_address_tree(
    db: AsyncSession,
    parent_id: int | None,
    type: AddressType | None = None,
) -> list[AddressTreeNode]:
    """Materialize the active subtree under ``parent_id``, one query per node."""
    nodes = await crud.get_active_children(db, parent_id, type)
    result = []
    for address in nodes:
        children = await _build_address_tree(db, address.id)
        result.append(_tree_node(address, children))
    return result


def _assemble_address_tree(
    addresses: list[Address], type: AddressType | None = None
) -> list[AddressTreeNode]:
    """Build the same tree as ``_build_address_tree`` from preloaded rows.

    ``addresses`` must be the active rows already sorted by name.
    """
    children_by_parent: dict[int | None, list[Address]] = {}
    for address in addresses:
        children_by_parent.setdefault(address.parent_id, []).append(address)

    def build_tree(parent_id: int | None) -> list[AddressTreeNode]:
        return [
            _tree_node(address, build_tree(address.id))
            for address in children_by_parent.get(parent_id, [])
        ]

    roots = children_by_parent.get(None, [])
    if type is not None:
        roots = [address for address in roots if address.type == type]
    return [_tree_node(address, build_tree(address.id)) for address in roots]


@database_operation("Failed to load address tree")
async def get_address_tree(
    db: AsyncSession,
    type: AddressType | None = None,
    parent_id: int | None = None,
    bulk_load: bool = False,
) -> list[AddressTreeNode] | list[AddressResponse]:
    """Get the active address hierarchy.

    Without ``parent_id`` (or with 0) the nested tree is built from the active
    root addresses, ``type`` narrowing the roots only. With a parent the
    direct active children are returned as a flat list.
    """
    if parent_id:
        children = await crud.get_active_children(db, parent_id, type)
        return [AddressResponse.model_validate(a) for a in children]

    if bulk_load:
        return _assemble_address_tree(await crud.get_all_active(db), type)
    return await _build_address_tree(db, None, type)


@database_operation("Failed to load address")
async def get_address(db: AsyncSession, address_id: int) -> Address:
    """Get an address by ID, including inactive ones."""
    return await _require_address(db, address_id)


@database_operation("Failed to create address")
async def create_address(db: AsyncSession, data: AddressCreate) -> Address:
    """Create a new active address.

    Raises:
        ValidationError: If the parent address does not exist
    """
    if data.parent_id:
        await _validate_parent(db, data.parent_id)

    values = data.model_dump()
    values["parent_id"] = data.parent_id or None
    values["is_active"] = True
    address_id = await crud.address_crud.insert(db, values)
    await db.commit()

    logger.info(
        f"Created address {address_id}",
        extra={"address_id": address_id, "address_type": data.type.value},
    )
    return await _require_address(db, address_id)


@database_operation("Failed to update address")
async def update_address(
    db: AsyncSession, address_id: int, data: AddressUpdate
) -> Address:
    """Apply the supplied fields to an address.

    Raises:
        NotFoundError: If the address does not exist
        ValidationError: If the new parent is the address itself or is missing
    """
    await _require_address(db, address_id)

    values = data.model_dump(exclude_unset=True)
    drop_null_fields(values, "name", "type", "is_active")
    if "parent_id" in values:
        parent_id = values["parent_id"]
        if parent_id == address_id:
            raise ValidationError("Address cannot be its own parent")
        if parent_id:
            await _validate_parent(db, parent_id)
        values["parent_id"] = parent_id or None

    await crud.address_crud.update(db, address_id, values)
    await db.commit()

    logger.info(
        f"Updated address {address_id}",
        extra={"address_id": address_id, "fields": sorted(values)},
    )
    return await _require_address(db, address_id)


@database_operation("Failed to delete address")
async def delete_address(db: AsyncSession, address_id: int) -> None:
    """Soft-delete an address that has no child addresses.

    Raises:
        NotFoundError: If the address does not exist
        ValidationError: If any address, active or not, has it as parent
    """
    await _require_address(db, address_id)

    if await crud.has_children(db, address_id):
        raise ValidationError("Cannot delete address with child addresses")

    await crud.address_crud.soft_delete(db, address_id)
    await db.commit()
    logger.info(f"Deleted address {address_id}", extra={"address_id": address_id})
