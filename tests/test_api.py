"""Tests for FastAPI endpoints and the response envelope."""

import pytest
from httpx import AsyncClient


async def create(client: AsyncClient, path: str, payload: dict) -> dict:
    response = await client.post(path, json=payload)
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.fixture
def room_payload():
    return {"name": "301室", "type": "room"}


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_check_returns_ok(self, client: AsyncClient) -> None:
        response = await client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["code"] == 200
        assert body["data"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_transaction_id_is_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/api/health", headers={"x-transaction-id": "abc"})
        assert response.headers["x-transaction-id"] == "abc"


class TestAddressEndpoints:
    @pytest.mark.asyncio
    async def test_create_returns_envelope(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/addresses", json={"name": "阳光小区", "type": "community"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["code"] == 200
        assert body["msg"] == "Address created successfully"
        assert body["data"]["isActive"] is True
        assert body["data"]["parentId"] is None

    @pytest.mark.asyncio
    async def test_tree_and_children(self, client: AsyncClient) -> None:
        community = await create(
            client, "/api/addresses", {"name": "阳光小区", "type": "community"}
        )
        building = await create(
            client,
            "/api/addresses",
            {"name": "1栋", "type": "building", "parentId": community["id"]},
        )

        tree = (await client.get("/api/addresses/tree")).json()["data"]
        assert tree[0]["name"] == "阳光小区"
        assert tree[0]["children"][0]["id"] == building["id"]

        response = await client.get(
            "/api/addresses/tree", params={"parentId": community["id"]}
        )
        assert [node["id"] for node in response.json()["data"]] == [building["id"]]

    @pytest.mark.asyncio
    async def test_list_is_paginated(self, client: AsyncClient, room_payload) -> None:
        await create(client, "/api/addresses", room_payload)

        response = await client.get("/api/addresses", params={"page": 1, "limit": 5})

        data = response.json()["data"]
        assert data["pagination"] == {"page": 1, "limit": 5, "total": 1, "totalPages": 1}
        assert data["items"][0]["name"] == "301室"

    @pytest.mark.asyncio
    async def test_missing_address_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/addresses/999")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == 404
        assert body["data"] is None
        assert "not found" in body["msg"]

    @pytest.mark.asyncio
    async def test_delete_with_children_is_400(self, client: AsyncClient) -> None:
        parent = await create(
            client, "/api/addresses", {"name": "阳光小区", "type": "community"}
        )
        await create(
            client,
            "/api/addresses",
            {"name": "1栋", "type": "building", "parentId": parent["id"]},
        )

        response = await client.delete(f"/api/addresses/{parent['id']}")

        assert response.status_code == 400
        assert response.json()["code"] == 400

    @pytest.mark.asyncio
    async def test_invalid_body_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/api/addresses", json={"type": "castle"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 400
        assert body["data"]["errors"]

    @pytest.mark.asyncio
    async def test_unknown_route_is_404_envelope(self, client: AsyncClient) -> None:
        response = await client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json()["code"] == 404


class TestResidentEndpoints:
    @pytest.mark.asyncio
    async def test_create_and_move_out(self, client: AsyncClient, room_payload) -> None:
        room = await create(client, "/api/addresses", room_payload)
        resident = await create(
            client,
            "/api/residents",
            {"name": "张三", "addressId": room["id"], "moveInDate": "2024-01-15"},
        )
        assert resident["address"]["type"] == "room"
        assert resident["moveInDate"].startswith("2024-01-15")

        response = await client.put(f"/api/residents/{resident['id']}/move-out")
        assert response.status_code == 200
        assert response.json()["data"]["isActive"] is False

        response = await client.put(f"/api/residents/{resident['id']}/move-out")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_by_address(self, client: AsyncClient, room_payload) -> None:
        room = await create(client, "/api/addresses", room_payload)
        await create(client, "/api/residents", {"name": "张三", "addressId": room["id"]})

        response = await client.get(f"/api/residents/by-address/{room['id']}")

        assert [r["name"] for r in response.json()["data"]] == ["张三"]


class TestExpenseEndpoints:
    @pytest.mark.asyncio
    async def test_batch_pay_and_stats(self, client: AsyncClient, room_payload) -> None:
        room = await create(client, "/api/addresses", room_payload)
        batch = await create(
            client,
            "/api/expenses/batch",
            {
                "expenses": [
                    {
                        "addressId": room["id"],
                        "expenseType": "water",
                        "amount": 45.5,
                        "period": "2024-01",
                    },
                    {
                        "addressId": room["id"],
                        "expenseType": "electricity",
                        "amount": 120,
                        "period": "2024-01",
                    },
                ]
            },
        )
        assert batch == {"success": True, "count": 2}

        items = (await client.get("/api/expenses")).json()["data"]["items"]
        water = next(item for item in items if item["expenseType"] == "water")
        assert water["amount"] == "45.50"
        assert water["status"] == "unpaid"

        response = await client.put(
            f"/api/expenses/{water['id']}/pay",
            json={"paidDate": "2024-01-20", "paymentMethod": "cash"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "paid"

        stats = (await client.get("/api/expenses/stats")).json()["data"]
        assert stats["paidAmount"] == "45.50"
        assert stats["unpaidAmount"] == "120.00"
        assert stats["totalCount"] == 2
        assert stats["byPeriod"] == [{"period": "2024-01", "amount": "165.50", "count": 2}]

    @pytest.mark.asyncio
    async def test_pay_without_body(self, client: AsyncClient, room_payload) -> None:
        room = await create(client, "/api/addresses", room_payload)
        created = await create(
            client,
            "/api/expenses",
            {"addressId": room["id"], "expenseType": "gas", "amount": 30, "period": "2024-03"},
        )

        response = await client.put(f"/api/expenses/{created['id']}/pay")

        assert response.status_code == 200
        assert response.json()["data"]["paidDate"] is not None

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient, room_payload) -> None:
        room = await create(client, "/api/addresses", room_payload)
        created = await create(
            client,
            "/api/expenses",
            {"addressId": room["id"], "expenseType": "gas", "amount": 30, "period": "2024-03"},
        )

        response = await client.delete(f"/api/expenses/{created['id']}")
        assert response.json() == {
            "code": 200,
            "msg": "Expense deleted successfully",
            "data": None,
        }

        response = await client.get(f"/api/expenses/{created['id']}")
        assert response.status_code == 404


class TestOpenApiSchema:
    @pytest.mark.asyncio
    async def test_open_type_fields_list_known_values(self, client: AsyncClient) -> None:
        response = await client.get("/api/openapi.json")
        assert response.status_code == 200
        schemas = response.json()["components"]["schemas"]

        resident_type = schemas["ResidentCreate"]["properties"]["residentType"]
        expense_type = schemas["ExpenseCreate"]["properties"]["expenseType"]
        assert "owner, tenant, family" in resident_type["description"]
        assert "water, electricity, gas" in expense_type["description"]
