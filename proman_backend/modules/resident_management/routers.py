"""Resident management API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..commons import BaseResponse, PaginatedResponse, ok
from . import services
from .schemas import ResidentCreate, ResidentResponse, ResidentUpdate

router = APIRouter(prefix="/residents", tags=["Residents"])


@router.get("", response_model=BaseResponse[PaginatedResponse[ResidentResponse]])
async def list_residents(
    db: DB,
    search: str | None = Query(None, description="Name, phone or ID card"),
    address_id: int | None = Query(None, alias="addressId"),
    resident_type: str | None = Query(None, alias="residentType"),
    phone: str | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    page: int = Query(1),
    limit: int = Query(10),
):
    """Get residents with pagination and filtering."""
    result = await services.list_residents(
        db,
        search=search,
        address_id=address_id,
        resident_type=resident_type,
        phone=phone,
        is_active=is_active,
        page=page,
        limit=limit,
    )
    return ok(result)


@router.get(
    "/by-address/{address_id}", response_model=BaseResponse[list[ResidentResponse]]
)
async def get_residents_by_address(address_id: int, db: DB):
    """Get the active residents of an address."""
    residents = await services.get_residents_by_address(db, address_id)
    return ok([ResidentResponse.model_validate(r) for r in residents])


@router.get("/{resident_id}", response_model=BaseResponse[ResidentResponse])
async def get_resident(resident_id: int, db: DB):
    """Get a resident by ID."""
    resident = await services.get_resident(db, resident_id)
    return ok(ResidentResponse.model_validate(resident))


@router.post("", response_model=BaseResponse[ResidentResponse])
async def create_resident(data: ResidentCreate, db: DB):
    """Create a new resident."""
    resident = await services.create_resident(db, data)
    return ok(
        ResidentResponse.model_validate(resident), msg="Resident created successfully"
    )


@router.put("/{resident_id}", response_model=BaseResponse[ResidentResponse])
async def update_resident(resident_id: int, data: ResidentUpdate, db: DB):
    """Update a resident."""
    resident = await services.update_resident(db, resident_id, data)
    return ok(
        ResidentResponse.model_validate(resident), msg="Resident updated successfully"
    )


@router.put("/{resident_id}/move-out", response_model=BaseResponse[ResidentResponse])
async def move_out_resident(resident_id: int, db: DB):
    """Record that a resident has moved out."""
    resident = await services.move_out_resident(db, resident_id)
    return ok(
        ResidentResponse.model_validate(resident), msg="Resident moved out successfully"
    )


@router.delete("/{resident_id}", response_model=BaseResponse[None])
async def delete_resident(resident_id: int, db: DB):
    """Soft-delete a resident."""
    await services.delete_resident(db, resident_id)
    return ok(msg="Resident deleted successfully")
