"""Dependency injection: session auth, role gates, tenant context, service key."""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.config import settings
from catalogo.core.security import decode_access_token, verify_service_key
from catalogo.db.base import get_db
from catalogo.models.store import Store
from catalogo.models.user import User, UserRole
from catalogo.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def _user_from_token(token: str) -> CurrentUser:
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise KeyError("sub")
    return CurrentUser(
        id=UUID(user_id),
        email="",  # full profile via /me
        role=UserRole(payload["role"]),
    )


async def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> CurrentUser:
    """Resolve the caller from the bearer header, falling back to the session cookie."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token = token or request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise credentials_exception
    try:
        return _user_from_token(token)
    except (JWTError, KeyError, ValueError):
        raise credentials_exception


def require_role(*allowed_roles: UserRole):
    """Dependency factory: checks the user has one of the allowed roles."""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{user.role.value}' not allowed. "
                f"Required: {', '.join(r.value for r in allowed_roles)}",
            )
        return user

    return checker


async def _check_admin_account(db: AsyncSession, user: CurrentUser) -> None:
    # the token role may be stale after a role change or delete
    account = await db.get(User, user.id)
    if account is None or not account.is_active or account.role != UserRole.ADMIN.value:
        logger.warning("Stale admin token for user %s", user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access revoked")


async def require_admin(
    user: CurrentUser = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Admin role in the token, confirmed against the current account row."""
    await _check_admin_account(db, user)
    return user


@dataclass
class StoreContext:
    """The tenant a dashboard request acts on."""

    store: Store
    user: CurrentUser

    @property
    def store_id(self) -> UUID:
        return self.store.id


async def get_store_context(
    store_id: UUID | None = Query(None, description="Admins only: store to act on"),
    user: CurrentUser = Depends(require_role(UserRole.ADMIN, UserRole.STORE)),
    db: AsyncSession = Depends(get_db),
) -> StoreContext:
    """Store users act on the store they own; admins pick any store by id."""
    if user.is_admin:
        if store_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="store_id is required for admin requests",
            )
        store = await db.get(Store, store_id)
    else:
        result = await db.execute(
            select(Store).where(Store.owner_id == user.id).order_by(Store.created_at).limit(1)
        )
        store = result.scalar_one_or_none()
        if store is not None and store_id is not None and store.id != store_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not allowed to act on another store",
            )

    if store is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    return StoreContext(store=store, user=user)


async def require_service_key(
    request: Request,
    x_service_key: str | None = Header(None),
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Elevated access: the service key header, or an authenticated admin session.

    Returns a short label of the credential that was accepted.
    """
    if x_service_key is not None:
        if verify_service_key(x_service_key):
            return "service-key"
        logger.warning("Rejected service key from %s", request.client.host if request.client else "?")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid service key")

    user = await get_current_user(request, token)
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    await _check_admin_account(db, user)
    return f"admin:{user.id}"
