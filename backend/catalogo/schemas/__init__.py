from catalogo.schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse,
)
from catalogo.schemas.category import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryListResponse,
)
from catalogo.schemas.order import (
    OrderResponse, OrderListResponse, OrderStatusUpdate, OrderItemsUpdate,
)

__all__ = [
    "ProductCreate", "ProductUpdate", "ProductResponse", "ProductListResponse",
    "CategoryCreate", "CategoryUpdate", "CategoryResponse", "CategoryListResponse",
    "OrderResponse", "OrderListResponse", "OrderStatusUpdate", "OrderItemsUpdate",
]
