"""Owner dashboard: store settings, profile, links and branding images."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import StoreContext, get_store_context
from catalogo.db.base import get_db
from catalogo.models.store import Store, StoreLink, StoreProfile
from catalogo.models.theme import Theme
from catalogo.schemas.store import (
    StoreLinkResponse,
    StoreLinksReplace,
    StoreProfileResponse,
    StoreProfileUpdate,
    StoreResponse,
    StoreSettingsResponse,
    StoreUpdate,
    ThemeOption,
)
from catalogo.services.stores import StoreInactiveError, check_catalog_flags
from catalogo.services.uploads import UploadRejected, delete_local_image, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard/store", tags=["store"])


async def _settings_response(db: AsyncSession, store: Store) -> StoreSettingsResponse:
    themes = await db.execute(
        select(Theme).where(Theme.active.is_(True)).order_by(Theme.sort_order.asc(), Theme.name.asc())
    )
    return StoreSettingsResponse(
        store=StoreResponse.model_validate(store),
        profile=StoreProfileResponse.model_validate(store.profile) if store.profile else None,
        links=[StoreLinkResponse.model_validate(link) for link in store.links],
        themes=[ThemeOption.model_validate(t) for t in themes.scalars().all()],
    )


@router.get("", response_model=StoreSettingsResponse)
async def get_store_settings(
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    return await _settings_response(db, ctx.store)


@router.patch("", response_model=StoreSettingsResponse)
async def update_store(
    body: StoreUpdate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """Edit store fields. Catalogs stay off while the store is inactive."""
    store = ctx.store
    update_data = body.model_dump(exclude_unset=True)

    try:
        check_catalog_flags(store, update_data)
    except StoreInactiveError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    if update_data.get("theme_id") is not None:
        theme = await db.get(Theme, update_data["theme_id"])
        if theme is None or not theme.active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown theme")
    for field in ("name", "whatsapp", "catalog_retail", "catalog_wholesale"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for key, value in update_data.items():
        setattr(store, key, value)

    await db.flush()
    await db.refresh(store)
    return await _settings_response(db, store)


@router.put("/profile", response_model=StoreProfileResponse)
async def upsert_profile(
    body: StoreProfileUpdate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(StoreProfile).where(StoreProfile.store_id == ctx.store_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        profile = StoreProfile(store_id=ctx.store_id)
        db.add(profile)

    for key, value in body.model_dump().items():
        setattr(profile, key, value)

    await db.flush()
    await db.refresh(profile)
    return StoreProfileResponse.model_validate(profile)


@router.put("/links", response_model=list[StoreLinkResponse])
async def replace_links(
    body: StoreLinksReplace,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """Replace the link set: ids not sent are deleted, the rest are upserted."""
    result = await db.execute(select(StoreLink).where(StoreLink.store_id == ctx.store_id))
    existing = {link.id: link for link in result.scalars().all()}
    keep = {link.id for link in body.links if link.id is not None}

    for link_id, link in existing.items():
        if link_id not in keep:
            await db.delete(link)

    saved: list[StoreLink] = []
    for item in body.links:
        data = item.model_dump(exclude={"id"})
        link = existing.get(item.id) if item.id is not None else None
        if link is None:
            link = StoreLink(**data, store_id=ctx.store_id)
            db.add(link)
        else:
            for key, value in data.items():
                setattr(link, key, value)
        saved.append(link)

    await db.flush()
    for link in saved:
        await db.refresh(link)

    logger.info("Store %s links replaced: %d kept, %d total", ctx.store.slug, len(keep), len(saved))
    saved.sort(key=lambda link: link.sort_order)
    return [StoreLinkResponse.model_validate(link) for link in saved]


async def _upload_branding(
    db: AsyncSession, store: Store, file: UploadFile, attr: str
) -> StoreResponse:
    try:
        url = await save_image(file, "stores", f"{store.id}_{attr.removesuffix('_url')}")
    except UploadRejected as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    delete_local_image(getattr(store, attr))
    setattr(store, attr, url)
    await db.flush()
    await db.refresh(store)
    return StoreResponse.model_validate(store)


@router.post("/logo", response_model=StoreResponse)
async def upload_logo(
    file: UploadFile = File(...),
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    return await _upload_branding(db, ctx.store, file, "logo_url")


@router.post("/banner", response_model=StoreResponse)
async def upload_banner(
    file: UploadFile = File(...),
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    return await _upload_branding(db, ctx.store, file, "banner_url")
