"""Dashboard product endpoints, scoped to the caller's store."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy import select, func, or_, case
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.config import settings
from catalogo.core.deps import StoreContext, get_store_context
from catalogo.db.base import get_db
from catalogo.models.category import Category
from catalogo.models.product import Product
from catalogo.schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductSort,
    ProductStatusFilter,
    ProductStockFilter,
    ProductUpdate,
    StockUpdate,
)
from catalogo.services.catalog import escape_like
from catalogo.services.uploads import UploadRejected, delete_local_image, save_image

router = APIRouter(prefix="/dashboard/products", tags=["products"])


async def _get_store_product(db: AsyncSession, ctx: StoreContext, product_id: UUID) -> Product:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.store_id == ctx.store_id)
    )
    product = result.scalar_one_or_none()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


async def _check_category(db: AsyncSession, ctx: StoreContext, category_id: UUID | None) -> None:
    if category_id is None:
        return
    result = await db.execute(
        select(Category.id).where(Category.id == category_id, Category.store_id == ctx.store_id)
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown category")


def _order_by(sort: ProductSort):
    if sort == "name":
        return [Product.name.asc(), Product.id.asc()]
    if sort == "price":
        return [Product.price_retail.asc(), Product.name.asc()]
    if sort == "stock":
        # Unlimited stock (NULL) sorts after every number
        return [
            case((Product.stock.is_(None), 1), else_=0),
            Product.stock.asc(),
            Product.name.asc(),
        ]
    return [Product.created_at.desc(), Product.id.desc()]


@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DASHBOARD_PAGE_SIZE, ge=1, le=100),
    status_filter: ProductStatusFilter = Query("all", alias="status"),
    stock: ProductStockFilter = "all",
    category_id: UUID | None = None,
    q: str | None = Query(None, max_length=100),
    sort: ProductSort = "newest",
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    query = select(Product).where(Product.store_id == ctx.store_id)

    if status_filter == "active":
        query = query.where(Product.active.is_(True))
    elif status_filter == "inactive":
        query = query.where(Product.active.is_(False))

    if stock == "in":
        query = query.where(or_(Product.stock.is_(None), Product.stock > 0))
    elif stock == "out":
        query = query.where(Product.stock == 0)
    elif stock == "unlimited":
        query = query.where(Product.stock.is_(None))

    if category_id:
        query = query.where(Product.category_id == category_id)
    if q and q.strip():
        like = f"%{escape_like(q.strip())}%"
        query = query.where(
            or_(
                Product.name.ilike(like, escape="\\"),
                Product.description.ilike(like, escape="\\"),
            )
        )

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()

    query = query.order_by(*_order_by(sort)).offset((page - 1) * size).limit(size)
    result = await db.execute(query)

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=page,
        size=size,
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    await _check_category(db, ctx, body.category_id)

    product = Product(**body.model_dump(), store_id=ctx.store_id)
    db.add(product)
    await db.flush()
    await db.refresh(product)
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    return ProductResponse.model_validate(await _get_store_product(db, ctx, product_id))


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    product = await _get_store_product(db, ctx, product_id)
    update_data = body.model_dump(exclude_unset=True)

    if update_data.get("category_id") is not None:
        await _check_category(db, ctx, update_data["category_id"])
    # Required columns cannot be cleared
    for field in ("name", "price_retail", "price_wholesale", "min_wholesale", "active"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for key, value in update_data.items():
        setattr(product, key, value)

    await db.flush()
    await db.refresh(product)
    return ProductResponse.model_validate(product)


@router.post("/{product_id}/stock", response_model=ProductResponse)
async def set_product_stock(
    product_id: UUID,
    body: StockUpdate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """Set stock to a number, or null for unlimited."""
    product = await _get_store_product(db, ctx, product_id)
    product.stock = body.stock
    await db.flush()
    await db.refresh(product)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    product = await _get_store_product(db, ctx, product_id)
    image_url = product.image_url
    await db.delete(product)
    await db.flush()
    delete_local_image(image_url)


@router.post("/{product_id}/image", response_model=ProductResponse)
async def upload_product_image(
    product_id: UUID,
    file: UploadFile = File(...),
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    product = await _get_store_product(db, ctx, product_id)
    try:
        url = await save_image(file, "products", str(product.id))
    except UploadRejected as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    delete_local_image(product.image_url)
    product.image_url = url
    await db.flush()
    await db.refresh(product)
    return ProductResponse.model_validate(product)
