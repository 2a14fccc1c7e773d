"""Unit tests for admin users/themes, tenant resolution and login."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
import uuid

import pytest
from fastapi import HTTPException, Response

from catalogo.core.config import settings
from catalogo.core.deps import get_store_context
from catalogo.core.security import hash_password, verify_password
from catalogo.models.theme import Theme
from catalogo.models.user import User, UserRole
from catalogo.schemas.auth import CurrentUser, LoginRequest
from catalogo.schemas.theme import ThemeCreate, ThemeUpdate
from catalogo.schemas.user import UserUpsert

NOW = datetime(2026, 4, 2, 10, 0, tzinfo=timezone.utc)


def _admin():
    return CurrentUser(id=uuid.uuid4(), email="admin@test.co", role=UserRole.ADMIN)


def _store_user():
    return CurrentUser(id=uuid.uuid4(), email="", role=UserRole.STORE)


def _user(role=UserRole.STORE, password="secreto1"):
    return User(
        id=uuid.uuid4(),
        email="ana@test.co",
        hashed_password=hash_password(password),
        role=role.value,
        is_active=True,
        created_at=NOW,
    )


def _found(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


# ── Tenant resolution ────────────────────────────

@pytest.mark.asyncio
async def test_admin_must_pick_a_store():
    with pytest.raises(HTTPException) as exc_info:
        await get_store_context(store_id=None, user=_admin(), db=AsyncMock())
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_admin_acts_on_any_store():
    store = MagicMock()
    mock_db = AsyncMock()
    mock_db.get.return_value = store

    ctx = await get_store_context(store_id=uuid.uuid4(), user=_admin(), db=mock_db)
    assert ctx.store is store


@pytest.mark.asyncio
async def test_store_user_gets_own_store():
    store = MagicMock()
    store.id = uuid.uuid4()
    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(store)

    ctx = await get_store_context(store_id=None, user=_store_user(), db=mock_db)
    assert ctx.store_id == store.id


@pytest.mark.asyncio
async def test_store_user_cannot_target_other_store():
    store = MagicMock()
    store.id = uuid.uuid4()
    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(store)

    with pytest.raises(HTTPException) as exc_info:
        await get_store_context(store_id=uuid.uuid4(), user=_store_user(), db=mock_db)
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_store_user_without_store():
    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(None)

    with pytest.raises(HTTPException) as exc_info:
        await get_store_context(store_id=None, user=_store_user(), db=mock_db)
    assert exc_info.value.status_code == 404


# ── Users ────────────────────────────────────────

@pytest.mark.asyncio
async def test_upsert_new_user_requires_password():
    from catalogo.api.admin.users import upsert_user

    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(None)

    with pytest.raises(HTTPException) as exc_info:
        await upsert_user(UserUpsert(email="nuevo@test.co"), _admin(), mock_db)
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_upsert_existing_user_changes_role():
    from catalogo.api.admin.users import upsert_user

    user = _user()
    mock_db = AsyncMock()
    mock_db.add = MagicMock()
    mock_db.execute.return_value = _found(user)

    response = await upsert_user(
        UserUpsert(email="Ana@Test.co", role=UserRole.ADMIN), _admin(), mock_db
    )
    assert response.role == UserRole.ADMIN
    assert user.role == "admin"
    mock_db.add.assert_not_called()


@pytest.mark.asyncio
async def test_toggle_role_flips():
    from catalogo.api.admin.users import toggle_role

    user = _user(UserRole.ADMIN)
    mock_db = AsyncMock()
    mock_db.get.return_value = user

    response = await toggle_role(user.id, _admin(), mock_db)
    assert response.role == UserRole.STORE


@pytest.mark.asyncio
async def test_admin_cannot_delete_self():
    from catalogo.api.admin.users import delete_user

    admin = _admin()
    with pytest.raises(HTTPException) as exc_info:
        await delete_user(admin.id, admin, AsyncMock())
    assert exc_info.value.status_code == 400


# ── Themes ───────────────────────────────────────

@pytest.mark.asyncio
async def test_create_theme():
    from catalogo.api.admin.themes import create_theme

    mock_db = AsyncMock()
    mock_db.add = MagicMock()

    async def _refresh(theme):
        theme.id = uuid.uuid4()
        theme.created_at = NOW

    mock_db.refresh.side_effect = _refresh

    response = await create_theme(
        ThemeCreate(name="Noche", config={"bgMode": "solid", "bgSolid": "#000"}), _admin(), mock_db
    )
    assert response.name == "Noche"
    assert response.config["bgSolid"] == "#000"
    mock_db.add.assert_called_once()


@pytest.mark.asyncio
async def test_update_theme_keeps_unset_fields():
    from catalogo.api.admin.themes import update_theme

    theme = Theme(id=uuid.uuid4(), name="Noche", active=True, sort_order=1, config={"text": "#fff"}, created_at=NOW)
    mock_db = AsyncMock()
    mock_db.get.return_value = theme

    response = await update_theme(theme.id, ThemeUpdate(active=False), _admin(), mock_db)
    assert response.active is False
    assert response.name == "Noche"
    assert response.config == {"text": "#fff"}


@pytest.mark.asyncio
async def test_delete_missing_theme():
    from catalogo.api.admin.themes import delete_theme

    mock_db = AsyncMock()
    mock_db.get.return_value = None
    with pytest.raises(HTTPException) as exc_info:
        await delete_theme(uuid.uuid4(), _admin(), mock_db)
    assert exc_info.value.status_code == 404


# ── Login ────────────────────────────────────────

@pytest.mark.asyncio
async def test_login_sets_session_cookie():
    from catalogo.api.auth import login

    user = _user()
    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(user)
    response = Response()

    token = await login(LoginRequest(email="ana@test.co", password="secreto1"), response, mock_db)

    assert token.role == UserRole.STORE
    assert settings.SESSION_COOKIE_NAME in response.headers["set-cookie"]
    assert verify_password("secreto1", user.hashed_password)


@pytest.mark.asyncio
async def test_login_wrong_password():
    from catalogo.api.auth import login

    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(_user())

    with pytest.raises(HTTPException) as exc_info:
        await login(LoginRequest(email="ana@test.co", password="otra-clave"), Response(), mock_db)
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_login_matches_email_case_insensitively():
    from catalogo.api.auth import login

    mock_db = AsyncMock()
    mock_db.execute.return_value = _found(_user())

    await login(LoginRequest(email="Ana@Test.co", password="secreto1"), Response(), mock_db)

    stmt = mock_db.execute.call_args[0][0]
    sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))
    assert "'ana@test.co'" in sql
