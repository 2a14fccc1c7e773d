"""Platform admin: catalog themes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import require_admin
from catalogo.db.base import get_db
from catalogo.models.theme import Theme
from catalogo.schemas.auth import CurrentUser
from catalogo.schemas.theme import ThemeCreate, ThemeResponse, ThemeUpdate

router = APIRouter(prefix="/admin/themes", tags=["admin"])


async def _get_theme(db: AsyncSession, theme_id: UUID) -> Theme:
    theme = await db.get(Theme, theme_id)
    if not theme:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Theme not found")
    return theme


@router.get("", response_model=list[ThemeResponse])
async def list_themes(
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Theme).order_by(Theme.sort_order.asc(), Theme.name.asc()))
    return [ThemeResponse.model_validate(t) for t in result.scalars().all()]


@router.post("", response_model=ThemeResponse, status_code=status.HTTP_201_CREATED)
async def create_theme(
    body: ThemeCreate,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    theme = Theme(**body.model_dump())
    db.add(theme)
    await db.flush()
    await db.refresh(theme)
    return ThemeResponse.model_validate(theme)


@router.patch("/{theme_id}", response_model=ThemeResponse)
async def update_theme(
    theme_id: UUID,
    body: ThemeUpdate,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    theme = await _get_theme(db, theme_id)
    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(theme, key, value)
    await db.flush()
    await db.refresh(theme)
    return ThemeResponse.model_validate(theme)


@router.delete("/{theme_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_theme(
    theme_id: UUID,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Stores using the theme fall back to the default one."""
    theme = await _get_theme(db, theme_id)
    await db.delete(theme)
    await db.flush()
