"""Platform admin: user accounts and roles."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import require_admin
from catalogo.core.security import hash_password
from catalogo.db.base import get_db
from catalogo.models.user import User, UserRole
from catalogo.schemas.auth import CurrentUser
from catalogo.schemas.user import UserListResponse, UserResponse, UserUpsert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin"])


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=UserListResponse)
async def list_users(
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    users = result.scalars().all()
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.put("", response_model=UserResponse)
async def upsert_user(
    body: UserUpsert,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create the account when the email is new, otherwise update role (and password if given)."""
    email = body.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        if not body.password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Password is required for new users",
            )
        user = User(email=email, hashed_password=hash_password(body.password), role=body.role.value)
        db.add(user)
        logger.info("Admin %s created user %s (%s)", admin.id, email, body.role.value)
    else:
        user.role = body.role.value
        if body.password:
            user.hashed_password = hash_password(body.password)

    await db.flush()
    await db.refresh(user)
    return UserResponse.model_validate(user)


@router.post("/{user_id}/toggle-role", response_model=UserResponse)
async def toggle_role(
    user_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Flip admin <-> store."""
    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot change your own role")
    user = await _get_user(db, user_id)
    user.role = UserRole.STORE.value if user.role == UserRole.ADMIN.value else UserRole.ADMIN.value
    await db.flush()
    await db.refresh(user)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete yourself")
    user = await _get_user(db, user_id)
    await db.delete(user)
    await db.flush()
    logger.warning("Admin %s deleted user %s", admin.id, user.email)
