"""SQLAlchemy models for Catalogo."""

from catalogo.models.user import User, UserRole
from catalogo.models.theme import Theme
from catalogo.models.store import Store, StoreProfile, StoreLink
from catalogo.models.category import Category
from catalogo.models.product import Product
from catalogo.models.order import Order, OrderItem, OrderStatus, CatalogType
from catalogo.models.notification import AdminNotification

__all__ = [
    "User",
    "UserRole",
    "Theme",
    "Store",
    "StoreProfile",
    "StoreLink",
    "Category",
    "Product",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CatalogType",
    "AdminNotification",
]
