import pytest

from api.users import db_manager as users_db
from config import settings
from core.security import verify_password
from db_models.user import UserRole


@pytest.mark.anyio
async def test_no_seed_when_admin_exists(db_session):
    assert await users_db.seed_default_admin(db_session) is None


@pytest.mark.anyio
async def test_seed_creates_admin_when_none_exists(db_session, monkeypatch):
    await users_db.update_user_role(db_session, 1, UserRole.USER)
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_USERNAME", "root")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", "root@test.com")

    admin = await users_db.seed_default_admin(db_session)
    assert admin is not None
    assert admin.username == "root"
    assert admin.role == "ADMIN"
    assert admin.enabled is True
    assert verify_password(settings.DEFAULT_ADMIN_PASSWORD, admin.hashed_password)

    # Idempotent once an admin exists
    assert await users_db.seed_default_admin(db_session) is None


@pytest.mark.anyio
async def test_seed_skips_when_username_taken(db_session):
    await users_db.update_user_role(db_session, 1, UserRole.USER)
    assert await users_db.seed_default_admin(db_session) is None
    assert len(await users_db.list_users(db_session)) == 2
