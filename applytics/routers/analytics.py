"""API routes for dashboard statistics."""

import logging

from fastapi import APIRouter, Depends

from applytics.core.exceptions import StorageError, storage_exception
from applytics.schemas.analytics import AnalyticsResponse, StatsResponse
from applytics.services.analytics_service import (
    AnalyticsService,
    get_analytics_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analytics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: AnalyticsService = Depends(get_analytics_service)):
    """Status distribution, keyword counts, interview rate, response time and trend."""
    try:
        return await service.get_stats()
    except StorageError as e:
        logger.error(f"Stats failed: {e}")
        raise storage_exception()


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(service: AnalyticsService = Depends(get_analytics_service)):
    """Time series for the dashboard charts."""
    try:
        return await service.get_analytics()
    except StorageError as e:
        logger.error(f"Analytics failed: {e}")
        raise storage_exception()
