"""API routes for application records and their history."""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from applytics.core.config import settings
from applytics.core.exceptions import (
    NotFoundError,
    StorageError,
    ValidationError,
    bad_request_exception,
    not_found_exception,
    storage_exception,
)
from applytics.schemas.application import (
    ApplicationCreate,
    ApplicationCreated,
    ApplicationRead,
    ApplicationUpdate,
    GlobalHistoryItem,
    HistoryEventRead,
)
from applytics.services.application_service import (
    ApplicationService,
    get_application_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])

history_router = APIRouter(prefix="/history", tags=["history"])


@router.post("", response_model=ApplicationCreated, status_code=status.HTTP_201_CREATED)
async def create_application(
    request: ApplicationCreate,
    service: ApplicationService = Depends(get_application_service),
):
    """Create an application together with its first history event."""
    try:
        application_id = await service.create(request)
        return ApplicationCreated(id=application_id)
    except ValidationError as e:
        raise bad_request_exception(e.message)
    except StorageError as e:
        logger.error(f"Create failed: {e}")
        raise storage_exception()


@router.get("", response_model=list[ApplicationRead])
async def list_applications(
    service: ApplicationService = Depends(get_application_service),
):
    """List all applications, most recently updated first."""
    try:
        return await service.list_applications()
    except StorageError as e:
        logger.error(f"List failed: {e}")
        raise storage_exception()


@router.get("/{application_id}", response_model=ApplicationRead)
async def get_application(
    application_id: int,
    service: ApplicationService = Depends(get_application_service),
):
    """Get a single application."""
    try:
        return await service.get(application_id)
    except NotFoundError as e:
        raise not_found_exception(e.message)
    except StorageError as e:
        logger.error(f"Get failed: {e}")
        raise storage_exception()


@router.patch("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_application(
    application_id: int,
    request: ApplicationUpdate,
    service: ApplicationService = Depends(get_application_service),
):
    """Apply a partial update to an application."""
    try:
        await service.update(application_id, request)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ValidationError as e:
        raise bad_request_exception(e.message)
    except NotFoundError as e:
        raise not_found_exception(e.message)
    except StorageError as e:
        logger.error(f"Update failed: {e}")
        raise storage_exception()


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: int,
    service: ApplicationService = Depends(get_application_service),
):
    """Delete an application and its history. Missing ids are not an error."""
    try:
        await service.delete(application_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except StorageError as e:
        logger.error(f"Delete failed: {e}")
        raise storage_exception()


@router.get("/{application_id}/history", response_model=list[HistoryEventRead])
async def get_history(
    application_id: int,
    service: ApplicationService = Depends(get_application_service),
):
    """Status history of one application, newest first."""
    try:
        return await service.list_history(application_id)
    except StorageError as e:
        logger.error(f"History read failed: {e}")
        raise storage_exception()


@history_router.get("", response_model=list[GlobalHistoryItem])
async def get_global_history(
    limit: int = Query(default=settings.global_history_limit, ge=1, le=100),
    service: ApplicationService = Depends(get_application_service),
):
    """Most recent status changes across all applications."""
    try:
        return await service.list_global_history(limit)
    except StorageError as e:
        logger.error(f"Global history read failed: {e}")
        raise storage_exception()
