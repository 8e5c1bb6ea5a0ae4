"""Application services."""

from applytics.services.analytics_service import AnalyticsService
from applytics.services.application_service import ApplicationService
from applytics.services.catalog_service import StatusCatalogService
from applytics.services.import_service import ImportService

__all__ = [
    "AnalyticsService",
    "ApplicationService",
    "ImportService",
    "StatusCatalogService",
]
