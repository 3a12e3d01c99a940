"""Tests for the address hierarchy services."""

import pytest

from proman_backend.core.exceptions import NotFoundError, ValidationError
from proman_backend.modules.address_management import services
from proman_backend.modules.address_management.models import AddressType
from proman_backend.modules.address_management.schemas import (
    AddressCreate,
    AddressTreeNode,
    AddressUpdate,
)
from proman_backend.modules.address_management.seed import seed_demo_addresses


def flatten(nodes: list[AddressTreeNode]) -> list[AddressTreeNode]:
    result = []
    for node in nodes:
        result.append(node)
        result.extend(flatten(node.children))
    return result


class TestCreateAddress:
    @pytest.mark.asyncio
    async def test_create_root_address(self, db):
        address = await services.create_address(
            db, AddressCreate(name="阳光小区", type=AddressType.COMMUNITY)
        )

        assert address.id is not None
        assert address.is_active is True
        assert address.parent_id is None
        assert address.created_at is not None

    @pytest.mark.asyncio
    async def test_create_with_missing_parent_fails(self, db):
        with pytest.raises(ValidationError, match="Parent address not found"):
            await services.create_address(
                db,
                AddressCreate(name="1栋", type=AddressType.BUILDING, parent_id=999),
            )

    @pytest.mark.asyncio
    async def test_parent_id_zero_creates_root(self, db):
        address = await services.create_address(
            db, AddressCreate(name="Root", type=AddressType.COMMUNITY, parent_id=0)
        )
        assert address.parent_id is None


class TestListAddresses:
    @pytest.mark.asyncio
    async def test_parent_id_zero_returns_only_roots(self, db, hierarchy, make_address):
        other = await make_address("绿城", AddressType.COMMUNITY)

        page = await services.list_addresses(db, parent_id=0)

        ids = {item.id for item in page.items}
        assert ids == {hierarchy["community"].id, other.id}
        assert page.pagination.total == 2

    @pytest.mark.asyncio
    async def test_filter_by_parent(self, db, hierarchy):
        page = await services.list_addresses(db, parent_id=hierarchy["floor"].id)
        assert {item.name for item in page.items} == {"301室", "302室"}

    @pytest.mark.asyncio
    async def test_search_and_type(self, db, hierarchy):
        page = await services.list_addresses(db, search="30", type=AddressType.ROOM)
        assert page.pagination.total == 2

        page = await services.list_addresses(db, search="3楼")
        assert [item.id for item in page.items] == [hierarchy["floor"].id]

    @pytest.mark.asyncio
    async def test_newest_first_and_paging(self, db, hierarchy):
        page = await services.list_addresses(db, page=1, limit=2)

        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3
        # room_a was created last
        assert page.items[0].id == hierarchy["room_a"].id

    @pytest.mark.asyncio
    async def test_out_of_range_paging_is_clamped(self, db, hierarchy):
        page = await services.list_addresses(db, page=0, limit=1000)
        assert page.pagination.page == 1
        assert page.pagination.limit == 100
        assert len(page.items) == 5


class TestAddressTree:
    @pytest.mark.asyncio
    async def test_full_tree_is_nested_and_sorted(self, db, hierarchy):
        tree = await services.get_address_tree(db)

        assert [node.name for node in tree] == ["阳光小区"]
        building = tree[0].children[0]
        floor = building.children[0]
        assert floor.id == hierarchy["floor"].id
        assert [room.name for room in floor.children] == ["301室", "302室"]
        assert all(room.children == [] for room in floor.children)

    @pytest.mark.asyncio
    async def test_inactive_node_hides_its_subtree(self, db, hierarchy):
        await services.update_address(
            db, hierarchy["building"].id, AddressUpdate(is_active=False)
        )

        tree = await services.get_address_tree(db)

        assert len(tree) == 1
        assert tree[0].children == []

    @pytest.mark.asyncio
    async def test_type_filter_applies_to_roots(self, db, hierarchy):
        assert await services.get_address_tree(db, type=AddressType.BUILDING) == []

        tree = await services.get_address_tree(db, type=AddressType.COMMUNITY)
        assert len(flatten(tree)) == 5

    @pytest.mark.asyncio
    async def test_parent_returns_flat_children(self, db, hierarchy):
        children = await services.get_address_tree(
            db, parent_id=hierarchy["building"].id
        )

        assert [child.id for child in children] == [hierarchy["floor"].id]
        assert not hasattr(children[0], "children")

    @pytest.mark.asyncio
    async def test_parent_zero_returns_full_tree(self, db, hierarchy):
        assert await services.get_address_tree(db, parent_id=0) == (
            await services.get_address_tree(db)
        )

    @pytest.mark.asyncio
    async def test_bulk_load_matches_per_node_queries(self, db, hierarchy, make_address):
        await make_address("A栋", AddressType.BUILDING, hierarchy["community"].id)
        await services.update_address(
            db, hierarchy["room_b"].id, AddressUpdate(is_active=False)
        )

        recursive = await services.get_address_tree(db)
        bulk = await services.get_address_tree(db, bulk_load=True)

        assert bulk == recursive
        assert hierarchy["room_b"].id not in {node.id for node in flatten(bulk)}


class TestUpdateAddress:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db, hierarchy):
        room = hierarchy["room_a"]

        await services.update_address(db, room.id, AddressUpdate(description="x"))
        updated = await services.get_address(db, room.id)

        assert updated.description == "x"
        assert updated.name == "301室"
        assert updated.type == AddressType.ROOM
        assert updated.parent_id == hierarchy["floor"].id

    @pytest.mark.asyncio
    async def test_cannot_be_own_parent(self, db, hierarchy):
        floor_id = hierarchy["floor"].id
        with pytest.raises(ValidationError, match="own parent"):
            await services.update_address(db, floor_id, AddressUpdate(parent_id=floor_id))

    @pytest.mark.asyncio
    async def test_missing_parent_fails(self, db, hierarchy):
        with pytest.raises(ValidationError, match="Parent address not found"):
            await services.update_address(
                db, hierarchy["floor"].id, AddressUpdate(parent_id=999)
            )

    @pytest.mark.asyncio
    async def test_missing_address_fails(self, db):
        with pytest.raises(NotFoundError):
            await services.update_address(db, 999, AddressUpdate(name="x"))


class TestDeleteAddress:
    @pytest.mark.asyncio
    async def test_delete_with_children_fails(self, db, hierarchy):
        with pytest.raises(ValidationError, match="child addresses"):
            await services.delete_address(db, hierarchy["floor"].id)

    @pytest.mark.asyncio
    async def test_inactive_children_still_block_delete(self, db, hierarchy):
        for room in ("room_a", "room_b"):
            await services.delete_address(db, hierarchy[room].id)

        with pytest.raises(ValidationError):
            await services.delete_address(db, hierarchy["floor"].id)

    @pytest.mark.asyncio
    async def test_delete_leaf_is_soft(self, db, hierarchy):
        room_id = hierarchy["room_a"].id

        await services.delete_address(db, room_id)

        address = await services.get_address(db, room_id)
        assert address.is_active is False

    @pytest.mark.asyncio
    async def test_delete_missing_fails(self, db):
        with pytest.raises(NotFoundError):
            await services.delete_address(db, 999)


class TestSeedDemoAddresses:
    @pytest.mark.asyncio
    async def test_seed_once(self, db):
        assert await seed_demo_addresses(db) == 5
        await db.commit()
        assert await seed_demo_addresses(db) == 0

        tree = await services.get_address_tree(db)
        rooms = tree[0].children[0].children[0].children
        assert [room.name for room in rooms] == ["301室", "302室"]
