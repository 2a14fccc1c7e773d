"""Public catalog endpoints: store view, paginated products, theme stylesheet."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.config import settings
from catalogo.db.base import get_db
from catalogo.models.category import Category
from catalogo.models.store import Store
from catalogo.schemas.catalog import CatalogView, CatalogCategory
from catalogo.schemas.product import CatalogPage, CatalogProduct
from catalogo.schemas.store import StorePublic, StoreProfileResponse, StoreLinkResponse
from catalogo.services.cart import CartMode
from catalogo.services.catalog import (
    CatalogUnavailable,
    catalog_products_query,
    check_catalog_access,
    count_query,
    has_more,
    page_query,
)
from catalogo.services.theme import render_root_css, resolve_store_theme, resolve_theme_variables

router = APIRouter(prefix="/public/stores", tags=["catalog"])


def parse_mode(raw: str) -> CartMode:
    try:
        return CartMode.parse(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid route")


async def get_store_by_slug(db: AsyncSession, slug: str) -> Store:
    result = await db.execute(select(Store).where(Store.slug == slug))
    store = result.scalar_one_or_none()
    if not store:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    return store


async def get_catalog_store(
    db: AsyncSession, slug: str, mode_raw: str, key: str | None
) -> tuple[Store, CartMode]:
    """Store behind a public catalog URL, after the access gates."""
    mode = parse_mode(mode_raw)
    store = await get_store_by_slug(db, slug)
    try:
        check_catalog_access(store, mode, key)
    except CatalogUnavailable as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    return store, mode


@router.get("/{slug}/theme.css")
async def get_theme_css(slug: str, db: AsyncSession = Depends(get_db)):
    store = await get_store_by_slug(db, slug)
    variables = resolve_theme_variables(await resolve_store_theme(db, store))
    return Response(content=render_root_css(variables), media_type="text/css")


@router.get("/{slug}/{mode}", response_model=CatalogView)
async def get_catalog(
    slug: str,
    mode: str,
    key: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Store header data for a catalog page: profile, links, categories, theme."""
    store, cart_mode = await get_catalog_store(db, slug, mode, key)

    categories = await db.execute(
        select(Category)
        .where(Category.store_id == store.id, Category.active.is_(True))
        .order_by(Category.sort_order.asc(), Category.name.asc())
    )
    theme = resolve_theme_variables(await resolve_store_theme(db, store))

    return CatalogView(
        store=StorePublic.model_validate(store),
        mode=cart_mode,
        profile=StoreProfileResponse.model_validate(store.profile) if store.profile else None,
        links=[StoreLinkResponse.model_validate(link) for link in store.links if link.active],
        categories=[CatalogCategory.model_validate(c) for c in categories.scalars().all()],
        theme=theme,
    )


@router.get("/{slug}/{mode}/products", response_model=CatalogPage)
async def list_catalog_products(
    slug: str,
    mode: str,
    offset: int = Query(0, ge=0),
    category_id: UUID | None = None,
    q: str | None = Query(None, max_length=100),
    key: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """One fixed-size page of the catalog, ordered by name."""
    store, cart_mode = await get_catalog_store(db, slug, mode, key)
    limit = settings.CATALOG_PAGE_SIZE

    query = catalog_products_query(store.id, category_id=category_id, search=q)
    total = (await db.execute(count_query(query))).scalar_one()
    result = await db.execute(page_query(query, offset, limit))
    products = result.scalars().all()

    items = [
        CatalogProduct(
            id=p.id,
            name=p.name,
            description=p.description,
            price=p.price_for(cart_mode.value),
            min_wholesale=max(1, p.min_wholesale or 1),
            stock=p.stock,
            image_url=p.image_url,
            category_id=p.category_id,
        )
        for p in products
    ]
    return CatalogPage(
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=has_more(offset, len(items), total),
    )
