"""
tests/conftest.py
Shared fixtures: a fresh SQLite database per test, an HTTP client bound to
the app, users of each role, activity factories and auth header helpers.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.gettempdir(), "activity_booking_app.db"
)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")

from datetime import date  # noqa: E402
from typing import List, Optional  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from config.database import Base, get_db  # noqa: E402
from main import app  # noqa: E402
from shared.models.models import Activity, ScheduleSlot, User, UserRole  # noqa: E402
from shared.utils.security import create_access_token, hash_password  # noqa: E402

TEST_PASSWORD = "secret123"


def auth_headers(user: User) -> dict:
    token, _ = create_access_token(str(user.id), user.role.value, user.email)
    return {"Authorization": f"Bearer {token}"}


async def available_spots(db: AsyncSession, slot_id) -> int:
    """Read a slot's counter straight from the database, bypassing the identity map."""
    return await db.scalar(
        select(ScheduleSlot.available_spots).where(ScheduleSlot.id == slot_id)
    )


def slot(day: date, start: str = "09:00", end: str = "10:00", spots: int = 5) -> dict:
    return {"date": day, "start_time": start, "end_time": end, "available_spots": spots}


# ── Database ───────────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Users ──────────────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def user(db: AsyncSession) -> User:
    user = User(
        name="Test User",
        email="user@test.com",
        password_hash=hash_password(TEST_PASSWORD),
        phone="9876543210",
        role=UserRole.USER,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def other_user(db: AsyncSession) -> User:
    other = User(
        name="Other User",
        email="other@test.com",
        password_hash=hash_password(TEST_PASSWORD),
        phone="9876500000",
        role=UserRole.USER,
    )
    db.add(other)
    await db.commit()
    return other


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    admin = User(
        name="Admin",
        email="admin@test.com",
        password_hash=hash_password(TEST_PASSWORD),
        phone="9999999999",
        role=UserRole.ADMIN,
    )
    db.add(admin)
    await db.commit()
    return admin


# ── Activities ─────────────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def make_activity(db: AsyncSession):
    """Factory: persist an activity with the given slots (dicts from ``slot()``)."""

    async def _make(
        slots: Optional[List[dict]] = None,
        title: str = "Kayak Tour",
        price: float = 45.0,
        capacity: int = 10,
        is_active: bool = True,
    ) -> Activity:
        if slots is None:
            slots = [slot(date(2030, 1, 10))]
        activity = Activity(
            title=title,
            description="Two hours paddling along the coast.",
            price=price,
            duration=120,
            capacity=capacity,
            location="North Harbour",
            is_active=is_active,
            schedule=[ScheduleSlot(position=i, **s) for i, s in enumerate(slots)],
        )
        db.add(activity)
        await db.commit()
        return activity

    return _make


@pytest_asyncio.fixture
async def activity(make_activity) -> Activity:
    return await make_activity(
        slots=[
            slot(date(2030, 1, 10), "09:00", "11:00", spots=3),
            slot(date(2030, 1, 11), "14:00", "16:00", spots=3),
        ]
    )
