from fastapi import APIRouter
from .notifications import router as notifications_router
from .orders import router as orders_router
from .stores import router as stores_router
from .themes import router as themes_router
from .users import router as users_router

admin_router = APIRouter()
admin_router.include_router(stores_router)
admin_router.include_router(users_router)
admin_router.include_router(themes_router)
admin_router.include_router(orders_router)
admin_router.include_router(notifications_router)
