"""API routes for the status catalog and user preferences."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from applytics.core.exceptions import (
    StorageError,
    ValidationError,
    bad_request_exception,
    storage_exception,
)
from applytics.core.storage import SettingsStorage
from applytics.schemas.catalog import (
    MigrateRequest,
    MigrateResponse,
    SettingValueRequest,
    StatusCatalogResponse,
    StatusLabelRequest,
    StatusOrderRequest,
    StatusUsageResponse,
)
from applytics.services.catalog_service import (
    CATALOG_KEY,
    StatusCatalogService,
    get_status_catalog_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/statuses", tags=["statuses"])

settings_router = APIRouter(prefix="/settings", tags=["settings"])


def get_settings_storage() -> SettingsStorage:
    """Dependency to get the preference store."""
    return SettingsStorage()


@router.get("", response_model=StatusCatalogResponse)
async def get_statuses(
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Get the ordered list of selectable statuses."""
    try:
        return StatusCatalogResponse(statuses=await catalog.get())
    except StorageError as e:
        logger.error(f"Catalog read failed: {e}")
        raise storage_exception()


@router.post("", response_model=StatusCatalogResponse)
async def add_status(
    request: StatusLabelRequest,
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Append a status to the catalog."""
    try:
        return StatusCatalogResponse(statuses=await catalog.add(request.label))
    except ValidationError as e:
        raise bad_request_exception(e.message)
    except StorageError as e:
        logger.error(f"Catalog add failed: {e}")
        raise storage_exception()


@router.put("", response_model=StatusCatalogResponse)
async def reorder_statuses(
    request: StatusOrderRequest,
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Replace the catalog with the given order."""
    try:
        return StatusCatalogResponse(statuses=await catalog.set_order(request.statuses))
    except ValidationError as e:
        raise bad_request_exception(e.message)
    except StorageError as e:
        logger.error(f"Catalog reorder failed: {e}")
        raise storage_exception()


@router.post("/reset", response_model=StatusCatalogResponse)
async def reset_statuses(
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Restore the default catalog. Existing applications are not changed."""
    try:
        return StatusCatalogResponse(statuses=await catalog.reset())
    except StorageError as e:
        logger.error(f"Catalog reset failed: {e}")
        raise storage_exception()


@router.post("/migrate", response_model=MigrateResponse)
async def migrate_status(
    request: MigrateRequest,
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Move every application at ``old_status`` to ``new_status``."""
    try:
        migrated = await catalog.bulk_migrate(request.old_status, request.new_status)
        return MigrateResponse(migrated=migrated)
    except ValidationError as e:
        raise bad_request_exception(e.message)
    except StorageError as e:
        logger.error(f"Status migration failed: {e}")
        raise storage_exception()


@router.get("/{label}/usage", response_model=StatusUsageResponse)
async def get_status_usage(
    label: str,
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Count the applications currently at ``label``."""
    try:
        return StatusUsageResponse(status=label, count=await catalog.usage(label))
    except StorageError as e:
        logger.error(f"Usage count failed: {e}")
        raise storage_exception()


@router.delete("/{label}", response_model=StatusCatalogResponse)
async def delete_status(
    label: str,
    migrate_to: str | None = Query(
        default=None, description="Relabel applications to this status first"
    ),
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Remove a status, optionally migrating its applications first.

    Without ``migrate_to`` applications keep the removed label.
    """
    try:
        migrated = await catalog.retire(label, migrate_to)
        if migrated:
            logger.info(f"Retired '{label}' after moving {migrated} application(s)")
        return StatusCatalogResponse(statuses=await catalog.get())
    except ValidationError as e:
        raise bad_request_exception(e.message)
    except StorageError as e:
        logger.error(f"Catalog delete failed: {e}")
        raise storage_exception()


@settings_router.get("", response_model=dict[str, Any])
async def get_settings(storage: SettingsStorage = Depends(get_settings_storage)):
    """Get all stored preferences."""
    try:
        return await storage.get_all()
    except SQLAlchemyError as e:
        logger.error(f"Database error getting settings: {e}")
        raise storage_exception()


@settings_router.put("/{key}")
async def save_setting(
    key: str,
    request: SettingValueRequest,
    storage: SettingsStorage = Depends(get_settings_storage),
    catalog: StatusCatalogService = Depends(get_status_catalog_service),
):
    """Store a preference value.

    The status catalog key goes through the catalog so its labels stay unique
    and non-blank.
    """
    if key == CATALOG_KEY:
        if not isinstance(request.value, list) or not all(
            isinstance(label, str) for label in request.value
        ):
            raise bad_request_exception("Status catalog must be a list of labels")
        try:
            await catalog.set_order(request.value)
        except ValidationError as e:
            raise bad_request_exception(e.message)
        except StorageError as e:
            logger.error(f"Catalog save failed: {e}")
            raise storage_exception()
        logger.info(f"Setting '{key}' saved")
        return {"status": "success", "key": key}

    try:
        await storage.save(key, request.value)
        logger.info(f"Setting '{key}' saved")
        return {"status": "success", "key": key}
    except SQLAlchemyError as e:
        logger.error(f"Database error saving setting '{key}': {e}")
        raise storage_exception()
