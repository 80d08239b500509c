"""
Pytest configuration and fixtures.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from queue_booking.api.routes import bookings as bookings_routes
from queue_booking.core.db import get_session
from queue_booking.main import app
from queue_booking.models.booking import BookingCandidate
from queue_booking.services.auth_service import create_admin, make_admin_token

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse"


@pytest.fixture
async def engine(tmp_path):
    """Fresh file-backed SQLite database per test (file so that sessions can run concurrently)."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'bookings.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_headers(session_maker):
    async with session_maker() as session:
        admin = await create_admin(session, ADMIN_USERNAME, ADMIN_PASSWORD)
        await session.commit()
    token, _ = make_admin_token(admin.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def sent_notifications(monkeypatch):
    """Capture booking events instead of pushing them to LINE."""
    sent = []

    async def fake_notify(event):
        sent.append(event)

    monkeypatch.setattr(bookings_routes, "notify_admin", fake_notify)
    return sent


def make_candidate(**overrides) -> BookingCandidate:
    data = {
        "name": "Somchai",
        "phone": "0812345678",
        "car_model": "Honda Civic",
        "license_plate": "1กข 1234",
        "date": "2024-06-01",
        "time": "10:00",
    }
    data.update(overrides)
    return BookingCandidate(**data)


def booking_payload(**overrides) -> dict:
    payload = {
        "name": "Somchai",
        "phone": "0812345678",
        "carModel": "Honda Civic",
        "licensePlate": "1กข 1234",
        "date": "2024-06-01",
        "time": "10:00",
    }
    payload.update(overrides)
    return payload
