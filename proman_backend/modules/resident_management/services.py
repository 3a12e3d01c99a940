"""Resident management business logic services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError, database_operation
from ...core.logging import get_logger
from ...core.pagination import calculate_offset, normalize_pagination_params
from ...core.utils import drop_null_fields, parse_datetime, sanitize_string, utc_now
from ..address_management.crud import address_crud
from ..address_management.models import AddressType
from ..commons import PaginatedResponse
from . import crud
from .models import Resident
from .schemas import ResidentCreate, ResidentResponse, ResidentUpdate

logger = get_logger(__name__)


async def _require_resident(db: AsyncSession, resident_id: int) -> Resident:
    resident = await crud.get_resident_by_id(db, resident_id)
    if not resident:
        raise NotFoundError(f"Resident with ID {resident_id} not found")
    return resident


async def _validate_room(db: AsyncSession, address_id: int) -> None:
    """Residents may only be attached to existing room addresses."""
    address = await address_crud.get(db, address_id)
    if not address:
        raise ValidationError("Address not found", field="addressId", value=address_id)
    if address.type != AddressType.ROOM:
        raise ValidationError(
            "Residents can only be assigned to room addresses",
            field="addressId",
            value=address_id,
        )


@database_operation("Failed to list residents")
async def list_residents(
    db: AsyncSession,
    search: str | None = None,
    address_id: int | None = None,
    resident_type: str | None = None,
    phone: str | None = None,
    is_active: bool | None = None,
    page: int = 1,
    limit: int = 10,
) -> PaginatedResponse[ResidentResponse]:
    """Get a page of residents with address summaries, newest first.

    ``search`` matches name, phone or ID card number.
    """
    page, limit = normalize_pagination_params(page, limit)
    residents, total = await crud.get_residents(
        db,
        skip=calculate_offset(page, limit),
        limit=limit,
        search=sanitize_string(search),
        address_id=address_id,
        resident_type=resident_type,
        phone=sanitize_string(phone, max_length=20),
        is_active=is_active,
    )
    return PaginatedResponse[ResidentResponse].from_items(
        items=[ResidentResponse.model_validate(r) for r in residents],
        total=total,
        page=page,
        limit=limit,
    )


@database_operation("Failed to load resident")
async def get_resident(db: AsyncSession, resident_id: int) -> Resident:
    """Get a resident by ID with its address summary."""
    return await _require_resident(db, resident_id)


@database_operation("Failed to load residents")
async def get_residents_by_address(
    db: AsyncSession, address_id: int
) -> list[Resident]:
    """Get the active residents of an address, ordered by name."""
    return await crud.get_active_residents_by_address(db, address_id)


@database_operation("Failed to create resident")
async def create_resident(db: AsyncSession, data: ResidentCreate) -> Resident:
    """Create a resident in a room.

    Raises:
        ValidationError: If the address is missing or is not a room, or the
            move-in date cannot be parsed
    """
    await _validate_room(db, data.address_id)

    values = data.model_dump()
    values["move_in_date"] = parse_datetime(data.move_in_date, field="moveInDate")
    values["is_active"] = True
    resident_id = await crud.resident_crud.insert(db, values)
    await db.commit()

    logger.info(
        f"Created resident {resident_id}",
        extra={"resident_id": resident_id, "address_id": data.address_id},
    )
    return await _require_resident(db, resident_id)


@database_operation("Failed to update resident")
async def update_resident(
    db: AsyncSession, resident_id: int, data: ResidentUpdate
) -> Resident:
    """Apply the supplied fields to a resident.

    Raises:
        NotFoundError: If the resident does not exist
        ValidationError: If a new address is missing or is not a room
    """
    await _require_resident(db, resident_id)

    values = drop_null_fields(
        data.model_dump(exclude_unset=True),
        "name",
        "address_id",
        "resident_type",
        "is_active",
    )
    if "address_id" in values:
        await _validate_room(db, values["address_id"])
    if "move_in_date" in values:
        values["move_in_date"] = parse_datetime(values["move_in_date"], field="moveInDate")
    if "move_out_date" in values:
        values["move_out_date"] = parse_datetime(
            values["move_out_date"], field="moveOutDate"
        )

    await crud.resident_crud.update(db, resident_id, values)
    await db.commit()

    logger.info(
        f"Updated resident {resident_id}",
        extra={"resident_id": resident_id, "fields": sorted(values)},
    )
    return await _require_resident(db, resident_id)


@database_operation("Failed to move out resident")
async def move_out_resident(db: AsyncSession, resident_id: int) -> Resident:
    """Record a move-out now and deactivate the resident.

    Raises:
        NotFoundError: If the resident does not exist
        ValidationError: If the resident has already moved out
    """
    resident = await _require_resident(db, resident_id)
    if resident.move_out_date is not None:
        raise ValidationError("Resident has already moved out")

    await crud.resident_crud.update(
        db, resident_id, {"move_out_date": utc_now(), "is_active": False}
    )
    await db.commit()

    logger.info(f"Resident {resident_id} moved out", extra={"resident_id": resident_id})
    return await _require_resident(db, resident_id)


@database_operation("Failed to delete resident")
async def delete_resident(db: AsyncSession, resident_id: int) -> None:
    """Soft-delete a resident."""
    await _require_resident(db, resident_id)

    await crud.resident_crud.soft_delete(db, resident_id)
    await db.commit()
    logger.info(f"Deleted resident {resident_id}", extra={"resident_id": resident_id})
