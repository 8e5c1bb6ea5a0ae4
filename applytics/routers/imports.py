"""API routes for bulk import."""

import logging

from fastapi import APIRouter, Depends

from applytics.core.exceptions import StorageError, storage_exception
from applytics.schemas.importer import ImportRequest, ImportResult, TableImportRequest
from applytics.services.import_service import ImportService, get_import_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])


@router.post("", response_model=ImportResult)
async def import_applications(
    request: ImportRequest,
    service: ImportService = Depends(get_import_service),
):
    """Insert new applications and merge rows matching an existing company + title."""
    try:
        return await service.import_rows(request.rows)
    except StorageError as e:
        logger.error(f"Import failed: {e}")
        raise storage_exception()


@router.post("/table", response_model=ImportResult)
async def import_table(
    request: TableImportRequest,
    service: ImportService = Depends(get_import_service),
):
    """Import a parsed spreadsheet given as headers plus positional rows."""
    try:
        return await service.import_table(request.headers, request.rows, request.mapping)
    except StorageError as e:
        logger.error(f"Table import failed: {e}")
        raise storage_exception()
