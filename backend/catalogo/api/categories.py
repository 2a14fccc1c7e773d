"""Dashboard category endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from catalogo.core.deps import StoreContext, get_store_context
from catalogo.db.base import get_db
from catalogo.models.category import Category
from catalogo.models.product import Product
from catalogo.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryListResponse,
)
from catalogo.services.uploads import UploadRejected, delete_local_image, save_image

router = APIRouter(prefix="/dashboard/categories", tags=["categories"])


async def _get_store_category(db: AsyncSession, ctx: StoreContext, category_id: UUID) -> Category:
    result = await db.execute(
        select(Category).where(
            Category.id == category_id,
            Category.store_id == ctx.store_id,
        )
    )
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


async def _ensure_unique_name(
    db: AsyncSession, ctx: StoreContext, name: str, exclude_id: UUID | None = None
) -> None:
    query = select(Category.id).where(
        Category.store_id == ctx.store_id,
        Category.name == name,
    )
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category with this name already exists",
        )


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """All categories of the store in display order."""
    result = await db.execute(
        select(Category)
        .where(Category.store_id == ctx.store_id)
        .order_by(Category.sort_order.asc(), Category.name.asc())
    )
    items = result.scalars().all()
    return CategoryListResponse(
        items=[CategoryResponse.model_validate(c) for c in items],
        total=len(items),
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_unique_name(db, ctx, body.name)

    category = Category(**body.model_dump(), store_id=ctx.store_id)
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    body: CategoryUpdate,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_store_category(db, ctx, category_id)

    if body.name and body.name != category.name:
        await _ensure_unique_name(db, ctx, body.name, exclude_id=category_id)

    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(category, field, value)

    await db.flush()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    """Delete a category; refused while products still reference it."""
    category = await _get_store_category(db, ctx, category_id)

    products_count = await db.execute(
        select(func.count()).select_from(Product).where(Product.category_id == category.id)
    )
    if products_count.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete category with existing products",
        )

    image_url = category.image_url
    await db.delete(category)
    await db.flush()
    delete_local_image(image_url)


@router.post("/{category_id}/image", response_model=CategoryResponse)
async def upload_category_image(
    category_id: UUID,
    file: UploadFile = File(...),
    ctx: StoreContext = Depends(get_store_context),
    db: AsyncSession = Depends(get_db),
):
    category = await _get_store_category(db, ctx, category_id)
    try:
        url = await save_image(file, "categories", str(category.id))
    except UploadRejected as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    delete_local_image(category.image_url)
    category.image_url = url
    await db.flush()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)
