"""Shared fixtures: a fresh in-memory database per test and an API client."""

import os
from pathlib import Path

# Point settings at the test config BEFORE anything from proman_backend is imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
os.environ.setdefault("CONFIG", str(PROJECT_ROOT / "resources" / "config" / "test.yaml"))

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from proman_backend.database import Base, get_db, import_models  # noqa: E402
from proman_backend.main import app  # noqa: E402
from proman_backend.modules.address_management import services as address_services  # noqa: E402
from proman_backend.modules.address_management.models import AddressType  # noqa: E402
from proman_backend.modules.address_management.schemas import AddressCreate  # noqa: E402

import_models()


@pytest_asyncio.fixture
async def session_factory():
    """Session factory bound to a brand-new in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """API client whose requests run against the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client
    app.dependency_overrides.clear()


async def create_address(db, name, type, parent_id=None, **fields):
    """Create an address through the service layer."""
    return await address_services.create_address(
        db,
        AddressCreate(name=name, type=type, parent_id=parent_id, **fields),
    )


@pytest_asyncio.fixture
async def make_address(db):
    async def _make(name, type, parent_id=None, **fields):
        return await create_address(db, name, type, parent_id, **fields)

    return _make


@pytest_asyncio.fixture
async def hierarchy(db):
    """community -> building -> floor -> two rooms."""
    community = await create_address(db, "阳光小区", AddressType.COMMUNITY)
    building = await create_address(db, "1栋", AddressType.BUILDING, community.id)
    floor = await create_address(db, "3楼", AddressType.FLOOR, building.id)
    room_b = await create_address(db, "302室", AddressType.ROOM, floor.id)
    room_a = await create_address(db, "301室", AddressType.ROOM, floor.id)
    return {
        "community": community,
        "building": building,
        "floor": floor,
        "room_a": room_a,
        "room_b": room_b,
    }
