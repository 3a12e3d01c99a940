"""Address management API routes."""

from fastapi import APIRouter, Query

from ...config import settings
from ...database import DB
from ..commons import BaseResponse, PaginatedResponse, ok
from . import services
from .models import AddressType
from .schemas import (
    AddressCreate,
    AddressResponse,
    AddressTreeNode,
    AddressUpdate,
)

router = APIRouter(prefix="/addresses", tags=["Addresses"])


@router.get("", response_model=BaseResponse[PaginatedResponse[AddressResponse]])
async def list_addresses(
    db: DB,
    search: str | None = Query(None, description="Substring of the address name"),
    type: AddressType | None = Query(None),
    parent_id: int | None = Query(
        None, alias="parentId", ge=0, description="0 selects root addresses"
    ),
    is_active: bool | None = Query(None, alias="isActive"),
    page: int = Query(1),
    limit: int = Query(10),
):
    """Get addresses with pagination and filtering."""
    result = await services.list_addresses(
        db,
        search=search,
        type=type,
        parent_id=parent_id,
        is_active=is_active,
        page=page,
        limit=limit,
    )
    return ok(result)


@router.get(
    "/tree",
    response_model=BaseResponse[list[AddressTreeNode | AddressResponse]],
)
async def get_address_tree(
    db: DB,
    type: AddressType | None = Query(None),
    parent_id: int | None = Query(None, alias="parentId", ge=0),
):
    """Get the active address hierarchy, or the direct children of a parent."""
    tree = await services.get_address_tree(
        db,
        type=type,
        parent_id=parent_id,
        bulk_load=settings.address_tree_bulk_load,
    )
    return ok(tree)


@router.get("/{address_id}", response_model=BaseResponse[AddressResponse])
async def get_address(address_id: int, db: DB):
    """Get an address by ID."""
    address = await services.get_address(db, address_id)
    return ok(AddressResponse.model_validate(address))


@router.post("", response_model=BaseResponse[AddressResponse])
async def create_address(data: AddressCreate, db: DB):
    """Create a new address."""
    address = await services.create_address(db, data)
    return ok(AddressResponse.model_validate(address), msg="Address created successfully")


@router.put("/{address_id}", response_model=BaseResponse[AddressResponse])
async def update_address(address_id: int, data: AddressUpdate, db: DB):
    """Update an address."""
    address = await services.update_address(db, address_id, data)
    return ok(AddressResponse.model_validate(address), msg="Address updated successfully")


@router.delete("/{address_id}", response_model=BaseResponse[None])
async def delete_address(address_id: int, db: DB):
    """Soft-delete an address without children."""
    await services.delete_address(db, address_id)
    return ok(msg="Address deleted successfully")
