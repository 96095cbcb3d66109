"""JSON API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from mediagate.api.routes import admin, auth, client_config, user_data

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(user_data.router, prefix="/user", tags=["user-data"])
router.include_router(client_config.router, prefix="/config", tags=["config"])
