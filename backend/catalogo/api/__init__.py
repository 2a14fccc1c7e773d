from fastapi import APIRouter
from .admin import admin_router
from .auth import router as auth_router
from .cart import router as cart_router
from .catalog import router as catalog_router
from .categories import router as categories_router
from .orders import router as orders_router
from .products import router as products_router
from .public_orders import router as public_orders_router
from .store_settings import router as store_settings_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(catalog_router)
api_router.include_router(cart_router)
api_router.include_router(public_orders_router)
api_router.include_router(products_router)
api_router.include_router(categories_router)
api_router.include_router(orders_router)
api_router.include_router(store_settings_router)
api_router.include_router(admin_router)
