"""Platform admin: store management."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import require_admin
from catalogo.db.base import get_db
from catalogo.models.store import Store
from catalogo.models.user import User
from catalogo.schemas.auth import CurrentUser
from catalogo.schemas.store import (
    AssignOwnerRequest,
    ExtendRequest,
    StoreAdminCreate,
    StoreAdminUpdate,
    StoreListResponse,
    StoreResponse,
)
from catalogo.services.catalog import escape_like
from catalogo.services.stores import apply_admin_update, catalogs_auto_off, extend_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/stores", tags=["admin"])


async def _get_store(db: AsyncSession, store_id: UUID) -> Store:
    store = await db.get(Store, store_id)
    if not store:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    return store


async def _ensure_slug_free(db: AsyncSession, slug: str, exclude_id: UUID | None = None) -> None:
    query = select(Store.id).where(Store.slug == slug)
    if exclude_id is not None:
        query = query.where(Store.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Slug '{slug}' is already taken",
        )


async def _ensure_user(db: AsyncSession, user_id: UUID | None) -> None:
    if user_id is not None and await db.get(User, user_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown owner")


@router.get("", response_model=StoreListResponse)
async def list_stores(
    q: str | None = Query(None, max_length=100),
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(Store)
    if q and q.strip():
        like = f"%{escape_like(q.strip())}%"
        query = query.where(
            or_(Store.name.ilike(like, escape="\\"), Store.slug.ilike(like, escape="\\"))
        )
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(Store.created_at.desc()))
    return StoreListResponse(
        items=[StoreResponse.model_validate(s) for s in result.scalars().all()],
        total=total,
    )


@router.post("", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
async def create_store(
    body: StoreAdminCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_slug_free(db, body.slug)
    await _ensure_user(db, body.owner_id)

    store = Store(**body.model_dump(), active=True)
    db.add(store)
    await db.flush()
    await db.refresh(store)
    logger.info("Admin %s created store %s", admin.id, store.slug)
    return StoreResponse.model_validate(store)


@router.patch("/{store_id}", response_model=StoreResponse)
async def update_store(
    store_id: UUID,
    body: StoreAdminUpdate,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Edit any store field; an inactive or expired store always ends with catalogs off."""
    store = await _get_store(db, store_id)
    update_data = body.model_dump(exclude_unset=True)

    if update_data.get("slug") and update_data["slug"] != store.slug:
        await _ensure_slug_free(db, update_data["slug"], exclude_id=store.id)
    # active_until may be cleared; the other columns may not
    for field in ("name", "slug", "whatsapp", "active", "catalog_retail", "catalog_wholesale"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    apply_admin_update(store, update_data)
    await db.flush()
    await db.refresh(store)
    return StoreResponse.model_validate(store)


@router.post("/{store_id}/owner", response_model=StoreResponse)
async def assign_owner(
    store_id: UUID,
    body: AssignOwnerRequest,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    store = await _get_store(db, store_id)
    await _ensure_user(db, body.owner_id)
    store.owner_id = body.owner_id
    await db.flush()
    await db.refresh(store)
    return StoreResponse.model_validate(store)


@router.post("/{store_id}/extend", response_model=StoreResponse)
async def extend_store_subscription(
    store_id: UUID,
    body: ExtendRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Set ``active_until`` to now plus N days and reactivate the store."""
    store = await _get_store(db, store_id)
    until = extend_store(store, body.days)
    catalogs_auto_off(store)
    await db.flush()
    await db.refresh(store)
    logger.info("Admin %s extended store %s until %s", admin.id, store.slug, until.isoformat())
    return StoreResponse.model_validate(store)


@router.delete("/{store_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_store(
    store_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    store = await _get_store(db, store_id)
    await db.delete(store)
    await db.flush()
    logger.warning("Admin %s deleted store %s", admin.id, store.slug)
