"""Public catalog: access gates, page queries and the load-more feed."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, or_, select

from catalogo.models.product import Product
from catalogo.models.store import Store
from catalogo.services.cart import CartMode

T = TypeVar("T")


class CatalogUnavailable(Exception):
    """The store exists but this catalog may not be shown."""

    def __init__(self, detail: str, status_code: int = 403):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def escape_like(s: str) -> str:
    """Escape SQL LIKE wildcards in user input."""
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def check_catalog_access(
    store: Store, mode: CartMode, key: str | None, now: datetime | None = None
) -> None:
    """Raise CatalogUnavailable unless ``store`` may show the ``mode`` catalog."""
    if mode == CartMode.WHOLESALE:
        if not store.wholesale_key:
            raise CatalogUnavailable("Wholesale catalog is not available", 404)
        if key != store.wholesale_key:
            raise CatalogUnavailable("Private wholesale catalog. Ask the store for access.")

    if not store.is_active_at(now or datetime.now(timezone.utc)):
        raise CatalogUnavailable("This store is deactivated")

    if mode == CartMode.RETAIL and not store.catalog_retail:
        raise CatalogUnavailable("Retail catalog not available")
    if mode == CartMode.WHOLESALE and not store.catalog_wholesale:
        raise CatalogUnavailable("Wholesale catalog not available")


def catalog_products_query(
    store_id: UUID,
    category_id: UUID | None = None,
    search: str | None = None,
) -> Select:
    """Products shown to shoppers: active, not sold out, optional filters."""
    query = select(Product).where(
        Product.store_id == store_id,
        Product.active.is_(True),
        or_(Product.stock.is_(None), Product.stock != 0),
    )
    if category_id:
        query = query.where(Product.category_id == category_id)
    if search and search.strip():
        like = f"%{escape_like(search.strip())}%"
        query = query.where(
            Product.name.ilike(like, escape="\\") | Product.description.ilike(like, escape="\\")
        )
    return query


def count_query(query: Select) -> Select:
    return select(func.count()).select_from(query.order_by(None).subquery())


def page_query(query: Select, offset: int, limit: int) -> Select:
    """Stable page: name first, id as tie breaker."""
    return query.order_by(Product.name.asc(), Product.id.asc()).offset(offset).limit(limit)


def has_more(offset: int, returned: int, total: int) -> bool:
    return offset + returned < total


@dataclass
class CatalogFeed(Generic[T]):
    """Rows accumulated by successive "load more" calls."""

    items: list[T] = field(default_factory=list)
    total: int = 0

    @property
    def offset(self) -> int:
        return len(self.items)

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.total

    def extend(self, rows: list[T], total: int) -> None:
        self.items.extend(rows)
        self.total = total

    def reset(self) -> None:
        self.items = []
        self.total = 0
