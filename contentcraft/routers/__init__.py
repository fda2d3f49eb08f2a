"""API routers."""
from contentcraft.routers.health_router import router as health_router
from contentcraft.routers.tenants_router import router as tenants_router
from contentcraft.routers.brands_router import router as brands_router
from contentcraft.routers.presets_router import router as presets_router
from contentcraft.routers.content_router import router as content_router
from contentcraft.routers.workspace_router import router as workspace_router

__all__ = [
    "health_router",
    "tenants_router",
    "brands_router",
    "presets_router",
    "content_router",
    "workspace_router",
]
