"""Shared fixtures: a throwaway SQLite database per test and an ASGI client."""

import os
import tempfile

# Configuration must be in place before the app is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.gettempdir(), "landlord_ledger_unused.db"
)
os.environ["DEBUG"] = "true"
os.environ["ALLOWED_ORIGINS"] = "*"
os.environ["OWNER_LOOKUP_ENABLED"] = "false"
os.environ["TRUST_FORWARDED_FOR"] = "true"
for key in ("RENTCAST_API_KEY", "FIREBASE_PROJECT_ID", "GOOGLE_APPLICATION_CREDENTIALS"):
    os.environ.pop(key, None)

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.main import app as fastapi_app
from app.routers.search import get_enabled_owner_lookup
from app.services.rentcast import RentCastClient, get_rentcast_client
from app.services.store import DatabaseStore


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    return DatabaseStore(db)


@pytest.fixture
async def frederick_landlords(session_factory):
    """The three sample Frederick, MD landlords, committed."""
    async with session_factory() as session:
        store = DatabaseStore(session)
        created = [
            await store.create_landlord(
                "Frederick Property Management", "Frederick, MD", "123 Main Street, Frederick, MD 21701"
            ),
            await store.create_landlord(
                "Potomac Rentals LLC", "Frederick, MD", "456 Market Street, Frederick, MD 21702"
            ),
            await store.create_landlord(
                "Carroll Creek Properties", "Frederick, MD", "789 Baker Street, Frederick, MD 21703"
            ),
        ]
        await session.commit()
        return created


@pytest.fixture
def rentcast_client():
    """Disabled by default; tests swap in ``make_rentcast`` clients."""
    return RentCastClient(api_key=None)


@pytest.fixture
async def client(session_factory, rentcast_client):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_rentcast_client] = lambda: rentcast_client
    fastapi_app.dependency_overrides[get_enabled_owner_lookup] = lambda: None

    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()
