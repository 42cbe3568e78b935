"""Route initialization module."""

from fastapi import APIRouter

from users_api.routes.health import router as health_router
from users_api.routes.user import router as user_router

# Operational endpoints live under /api
api_router = APIRouter(prefix="/api")
api_router.include_router(health_router)

# Resource routes are served from the root (/users)
users_router = APIRouter()
users_router.include_router(user_router)


__all__ = ["api_router", "users_router"]
