"""API routers."""

from applytics.routers.analytics import router as analytics_router
from applytics.routers.applications import history_router
from applytics.routers.applications import router as applications_router
from applytics.routers.catalog import router as catalog_router
from applytics.routers.catalog import settings_router
from applytics.routers.imports import router as import_router

__all__ = [
    "analytics_router",
    "applications_router",
    "catalog_router",
    "history_router",
    "import_router",
    "settings_router",
]
