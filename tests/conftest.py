"""Test fixtures."""

import os
from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from app.main import app
from app.core.database import Base, get_db


@pytest_asyncio.fixture
async def engine():
    """Create an in-memory database shared across connections."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    """Database session for direct service calls."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, one session per request."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def booking_date():
    """A date safely in the future for every timezone."""
    return date.today() + timedelta(days=7)


@pytest_asyncio.fixture
async def sport(client):
    response = await client.post(
        "/sports",
        json={"name": "Bowling", "description": "Ten-pin bowling"},
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def facility(client, sport):
    """A facility with four lanes of bowling, open 09:00-21:00 every day."""
    response = await client.post(
        "/facilities",
        json={
            "name": "Strike Zone",
            "address": "12 Lane Street, Pune",
            "contact_number": "020-555-0101",
            "owner_id": "owner-1",
            "amenities": ["Parking", "Cafe"],
            "sports": [
                {
                    "sport_id": sport["id"],
                    "price": "250.00",
                    "resource_count": 4,
                    "max_people_per_unit": 6,
                    "operating_hours": {
                        "days": "All Days",
                        "opening": "9:00 AM",
                        "closing": "9:00 PM",
                    },
                }
            ],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_booking(client, facility, sport, booking_date):
    """Post a booking request, overriding any field."""

    async def _make_booking(**overrides):
        payload = {
            "facility_id": facility["id"],
            "sport_id": sport["id"],
            "user_id": "user-1",
            "date": booking_date.isoformat(),
            "time_slot": "10:00",
            "duration": 2,
            "number_of_resources": 1,
            "number_of_people": 4,
            "payment_mode": "Cash",
        }
        payload.update(overrides)
        return await client.post("/bookings", json=payload)

    return _make_booking
