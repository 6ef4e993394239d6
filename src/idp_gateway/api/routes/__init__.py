from fastapi import APIRouter

from .auth import router as auth_router
from .health import router as health_router

health_router_root = health_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
