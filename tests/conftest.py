import os

# Select the test settings before any project module reads configuration
os.environ.setdefault("MODE", "test")

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from httpx import AsyncClient, ASGITransport

from main import app as fastapi_app
import db as project_db
import db_models  # ensure models are registered on Base.metadata
from db_base import Base
from db_models.user import User, UserRole
from config import settings
from core.security import get_password_hash, create_access_token

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL") or settings.DATABASE_URL

ADMIN_PASSWORD = "adminpass"
USER_PASSWORD = "userpass1"

# Hashed once for the whole run
_ADMIN_HASH = get_password_hash(ADMIN_PASSWORD)
_USER_HASH = get_password_hash(USER_PASSWORD)

engine = create_async_engine(
    TEST_DATABASE_URL,
    future=True,
    echo=False,
    poolclass=NullPool  # Disable connection pooling for tests
)
AsyncSessionTest = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False
)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def db_session():
    """
    Fresh schema per test with two accounts:
    ``admin`` (id 1, ADMIN) and ``jdoe`` (id 2, USER).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionTest() as session:
        session.add_all([
            User(
                id=1,
                username="admin",
                email="admin@test.com",
                hashed_password=_ADMIN_HASH,
                firstname="Test",
                lastname="Admin",
                role=UserRole.ADMIN.value,
                enabled=True,
            ),
            User(
                id=2,
                username="jdoe",
                email="jdoe@test.com",
                hashed_password=_USER_HASH,
                firstname="John",
                lastname="Doe",
                role=UserRole.USER.value,
                enabled=True,
            ),
        ])
        await session.commit()
        yield session


@pytest.fixture
async def async_client(db_session):
    # Override the get_session dependency to create a fresh session for each request
    async def override_get_session():
        async with AsyncSessionTest() as session:
            yield session

    fastapi_app.dependency_overrides[project_db.get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://testserver") as ac:
        yield ac

    # Clean up
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def admin_token():
    """Generate an admin JWT token for tests."""
    return create_access_token("admin", claims={"role": "ADMIN"})


@pytest.fixture(scope="session")
def user_token():
    """Generate a regular user JWT token for tests."""
    return create_access_token("jdoe", claims={"role": "USER"})


@pytest.fixture(scope="session")
def admin_headers(admin_token):
    """Return authorization headers for admin user."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture(scope="session")
def user_headers(user_token):
    """Return authorization headers for the regular user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def hardware_payload():
    return {
        "name": "Dell Latitude 7440",
        "purchase_price": "1000.00",
        "purchase_date": "2022-01-15",
        "residual_value": "100.00",
        "useful_life_years": 5,
        "serial_number": "SN-0001",
        "location": "HQ Floor 2",
        "warranty_end_date": "2025-01-15",
    }


@pytest.fixture
def software_payload():
    return {
        "name": "Office 365",
        "purchase_price": "120.00",
        "purchase_date": "2024-03-01",
        "useful_life_years": 1,
        "license_key": "O365-AAAA-BBBB",
        "expiry_date": "2099-03-01",
    }


@pytest.fixture
def session_factory(db_session):
    """Open independent sessions, e.g. to interleave two writers."""
    return AsyncSessionTest
