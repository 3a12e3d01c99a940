"""Tests for the resident services."""

from datetime import datetime

import pytest

from proman_backend.core.exceptions import NotFoundError, ValidationError
from proman_backend.modules.resident_management import services
from proman_backend.modules.resident_management.schemas import (
    ResidentCreate,
    ResidentResponse,
    ResidentUpdate,
)


@pytest.fixture
def resident_data(hierarchy):
    return ResidentCreate(
        name="张三",
        phone="13800138000",
        id_card="110101199001011234",
        address_id=hierarchy["room_a"].id,
        move_in_date="2024-01-15",
    )


class TestCreateResident:
    @pytest.mark.asyncio
    async def test_create_in_room(self, db, hierarchy, resident_data):
        resident = await services.create_resident(db, resident_data)

        assert resident.id is not None
        assert resident.is_active is True
        assert resident.resident_type == "owner"
        assert resident.move_in_date.date() == datetime(2024, 1, 15).date()
        assert resident.address.id == hierarchy["room_a"].id

    @pytest.mark.asyncio
    async def test_create_in_building_fails(self, db, hierarchy, resident_data):
        data = resident_data.model_copy(update={"address_id": hierarchy["building"].id})
        with pytest.raises(ValidationError, match="room"):
            await services.create_resident(db, data)

    @pytest.mark.asyncio
    async def test_create_with_missing_address_fails(self, db, resident_data):
        data = resident_data.model_copy(update={"address_id": 999})
        with pytest.raises(ValidationError, match="Address not found"):
            await services.create_resident(db, data)

    @pytest.mark.asyncio
    async def test_invalid_move_in_date_fails(self, db, resident_data):
        data = resident_data.model_copy(update={"move_in_date": "15/01/2024"})
        with pytest.raises(ValidationError, match="moveInDate"):
            await services.create_resident(db, data)


class TestQueryResidents:
    @pytest.mark.asyncio
    async def test_response_embeds_address_summary(self, db, hierarchy, resident_data):
        created = await services.create_resident(db, resident_data)

        payload = ResidentResponse.model_validate(
            await services.get_resident(db, created.id)
        ).model_dump(by_alias=True, mode="json")

        assert payload["address"] == {
            "id": hierarchy["room_a"].id,
            "name": "301室",
            "type": "room",
            "code": None,
        }
        assert payload["moveInDate"].startswith("2024-01-15")
        assert payload["moveOutDate"] is None

    @pytest.mark.asyncio
    async def test_search_matches_phone_and_id_card(self, db, resident_data):
        await services.create_resident(db, resident_data)

        for term in ("张", "138001", "19900101"):
            page = await services.list_residents(db, search=term)
            assert page.pagination.total == 1, term

        page = await services.list_residents(db, search="李四")
        assert page.items == []

    @pytest.mark.asyncio
    async def test_by_address_lists_active_residents_by_name(
        self, db, hierarchy, resident_data
    ):
        room_id = hierarchy["room_a"].id
        await services.create_resident(db, resident_data)
        second = await services.create_resident(
            db, ResidentCreate(name="Alice", address_id=room_id, resident_type="tenant")
        )
        await services.move_out_resident(db, second.id)
        await services.create_resident(db, ResidentCreate(name="Bob", address_id=room_id))

        residents = await services.get_residents_by_address(db, room_id)

        assert [r.name for r in residents] == ["Bob", "张三"]

    @pytest.mark.asyncio
    async def test_get_missing_fails(self, db):
        with pytest.raises(NotFoundError):
            await services.get_resident(db, 999)


class TestUpdateResident:
    @pytest.mark.asyncio
    async def test_move_to_another_room(self, db, hierarchy, resident_data):
        resident = await services.create_resident(db, resident_data)

        updated = await services.update_resident(
            db, resident.id, ResidentUpdate(address_id=hierarchy["room_b"].id)
        )

        assert updated.address_id == hierarchy["room_b"].id
        assert updated.address.name == "302室"
        assert updated.name == "张三"

    @pytest.mark.asyncio
    async def test_move_to_floor_fails(self, db, hierarchy, resident_data):
        resident = await services.create_resident(db, resident_data)
        with pytest.raises(ValidationError):
            await services.update_resident(
                db, resident.id, ResidentUpdate(address_id=hierarchy["floor"].id)
            )


class TestMoveOut:
    @pytest.mark.asyncio
    async def test_move_out_twice(self, db, resident_data):
        resident = await services.create_resident(db, resident_data)

        moved = await services.move_out_resident(db, resident.id)
        assert moved.is_active is False
        assert moved.move_out_date is not None

        with pytest.raises(ValidationError, match="already moved out"):
            await services.move_out_resident(db, resident.id)

    @pytest.mark.asyncio
    async def test_move_out_missing_fails(self, db):
        with pytest.raises(NotFoundError):
            await services.move_out_resident(db, 999)


class TestDeleteResident:
    @pytest.mark.asyncio
    async def test_delete_is_soft(self, db, resident_data):
        resident = await services.create_resident(db, resident_data)

        await services.delete_resident(db, resident.id)

        assert (await services.get_resident(db, resident.id)).is_active is False
