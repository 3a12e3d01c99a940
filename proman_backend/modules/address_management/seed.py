"""Seed data for address management module.

Contains a small demo hierarchy: one community down to two rooms.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .models import AddressType

# Nested demo hierarchy; each entry may carry its own "children"
DEMO_ADDRESS_SEED_DATA = [
    {
        "name": "阳光小区",
        "type": AddressType.COMMUNITY,
        "code": "YG",
        "description": "Demo community",
        "children": [
            {
                "name": "1栋",
                "type": AddressType.BUILDING,
                "code": "YG-01",
                "children": [
                    {
                        "name": "3楼",
                        "type": AddressType.FLOOR,
                        "code": "YG-01-03",
                        "children": [
                            {
                                "name": "301室",
                                "type": AddressType.ROOM,
                                "code": "YG-01-0301",
                                "area": Decimal("89.50"),
                            },
                            {
                                "name": "302室",
                                "type": AddressType.ROOM,
                                "code": "YG-01-0302",
                                "area": Decimal("120.00"),
                            },
                        ],
                    },
                ],
            },
        ],
    },
]


async def _insert_nodes(
    db: AsyncSession, nodes: list[dict], parent_id: int | None
) -> int:
    created_count = 0
    for node_data in nodes:
        values = {k: v for k, v in node_data.items() if k != "children"}
        address_id = await crud.address_crud.insert(
            db, {**values, "parent_id": parent_id, "is_active": True}
        )
        created_count += 1
        created_count += await _insert_nodes(
            db, node_data.get("children", []), address_id
        )
    return created_count


async def seed_demo_addresses(db: AsyncSession) -> int:
    """Seed the demo address hierarchy into an empty addresses table.

    Args:
        db: AsyncSession database session

    Returns:
        Number of addresses created (0 if addresses already exist)
    """
    if await crud.count_addresses(db) > 0:
        return 0  # Already seeded

    created_count = await _insert_nodes(db, DEMO_ADDRESS_SEED_DATA, None)
    await db.flush()
    return created_count
