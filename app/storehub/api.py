from fastapi import APIRouter

from app.storehub.core.config import settings
from app.storehub.routers.admin import router as admin_router
from app.storehub.routers.auth import router as auth_router
from app.storehub.routers.health import router as health_router
from app.storehub.routers.metrics import router as metrics_router
from app.storehub.routers.sectors import router as sectors_router
from app.storehub.routers.stores import router as stores_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
api_router.include_router(stores_router, prefix=settings.API_PREFIX, tags=["stores"])
api_router.include_router(sectors_router, prefix=settings.API_PREFIX, tags=["sectors"])
api_router.include_router(admin_router, prefix=settings.API_PREFIX, tags=["admin"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
