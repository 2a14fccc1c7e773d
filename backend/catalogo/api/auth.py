"""Authentication endpoints: login, logout, current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.config import settings
from catalogo.core.deps import get_current_user
from catalogo.core.security import verify_password, create_access_token
from catalogo.db.base import get_db
from catalogo.models.user import User, UserRole
from catalogo.schemas.auth import LoginRequest, TokenResponse, CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    """Authenticate via email + password, return JWT and set the session cookie."""
    result = await db.execute(select(User).where(User.email == body.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(body.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    token = create_access_token(user_id=user.id, role=user.role)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s logged in (%s)", user.email, user.role)
    return TokenResponse(access_token=token, user_id=user.id, role=UserRole(user.role))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


@router.get("/me", response_model=CurrentUser)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return full profile of the current authenticated user."""
    user = await db.get(User, current_user.id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return CurrentUser(
        id=user.id,
        email=user.email,
        role=UserRole(user.role),
        is_active=user.is_active,
    )
