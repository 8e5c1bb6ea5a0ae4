"""Record store for applications and their status history."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from applytics.core.exceptions import NotFoundError, StorageError, ValidationError
from applytics.core.storage import async_session
from applytics.models.application import Application, HistoryEvent
from applytics.schemas.application import (
    ApplicationCreate,
    ApplicationRead,
    ApplicationUpdate,
    GlobalHistoryItem,
    HistoryEventRead,
)
from applytics.services.history import (
    new_application,
    record_transition,
    rewrite_origin_date,
    touch,
)
from applytics.utils.dates import utc_now
from applytics.utils.validators import validate_new_application, validate_update_fields

logger = logging.getLogger(__name__)


class ApplicationService:
    """Create, mutate and read applications.

    Every write runs in a single transaction so an application row is never
    visible without the history events its change implies.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory or async_session
        self._clock = clock

    # ------------------------------------------------------------------ #
    # write side
    # ------------------------------------------------------------------ #

    async def create(self, data: ApplicationCreate) -> int:
        """Insert an application and its creation event; return the new id."""
        validation = validate_new_application(data.company, data.title)
        if not validation.is_valid:
            raise ValidationError(validation.field_name, validation.error)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    application = new_application(
                        company=data.company,
                        title=data.title,
                        now=self._clock(),
                        status=data.status,
                        date_applied=data.date_applied,
                        process_steps=data.process_steps,
                        outcome=data.outcome,
                        notes=data.notes,
                    )
                    session.add(application)
                    await session.flush()
                    application_id = application.id
        except SQLAlchemyError as e:
            logger.error(f"Database error creating application: {e}")
            raise StorageError("create", str(e)) from e

        logger.info(
            f"Created application {application_id}: {data.company} - {data.title}"
        )
        return application_id

    async def update(
        self, application_id: int, changes: ApplicationUpdate | dict[str, Any]
    ) -> None:
        """Apply the supplied fields and keep the history trail consistent."""
        if isinstance(changes, ApplicationUpdate):
            fields = changes.supplied_fields()
        else:
            fields = ApplicationUpdate.model_validate(changes).supplied_fields()

        validation = validate_update_fields(fields)
        if not validation.is_valid:
            raise ValidationError(validation.field_name, validation.error)
        for warning in validation.warnings:
            logger.warning(f"Application {application_id}: {warning}")

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    application = await session.get(Application, application_id)
                    if application is None:
                        logger.warning(f"Update of missing application {application_id}")
                        raise NotFoundError(application_id)

                    now = self._clock()
                    previous_status = application.status

                    for name, value in fields.items():
                        setattr(application, name, value)
                    touch(application, now)

                    if "status" in fields:
                        record_transition(
                            session, application, previous_status, fields["status"], now
                        )

                    if "date_applied" in fields:
                        await rewrite_origin_date(
                            session, application_id, fields["date_applied"]
                        )
        except SQLAlchemyError as e:
            logger.error(f"Database error updating application {application_id}: {e}")
            raise StorageError("update", str(e)) from e

        logger.info(
            f"Updated application {application_id}: {', '.join(sorted(fields)) or 'touch'}"
        )

    async def delete(self, application_id: int) -> None:
        """Delete an application and, by cascade, its history. Idempotent."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(Application).where(Application.id == application_id)
                    )
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting application {application_id}: {e}")
            raise StorageError("delete", str(e)) from e

        if result.rowcount:
            logger.info(f"Deleted application {application_id}")
        else:
            logger.debug(f"Delete of missing application {application_id} ignored")

    # ------------------------------------------------------------------ #
    # read side
    # ------------------------------------------------------------------ #

    async def get(self, application_id: int) -> ApplicationRead:
        """Return one application."""
        try:
            async with self._session_factory() as session:
                application = await session.get(Application, application_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error reading application {application_id}: {e}")
            raise StorageError("get", str(e)) from e

        if application is None:
            raise NotFoundError(application_id)
        return ApplicationRead.model_validate(application)

    async def list_applications(self) -> list[ApplicationRead]:
        """All applications, most recently touched first."""
        query = select(Application).order_by(
            Application.last_updated.desc(), Application.id.desc()
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                applications = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Database error listing applications: {e}")
            raise StorageError("list", str(e)) from e

        return [ApplicationRead.model_validate(app) for app in applications]

    async def list_history(self, application_id: int) -> list[HistoryEventRead]:
        """History of one application, newest first. Unknown ids give []."""
        query = (
            select(HistoryEvent)
            .where(HistoryEvent.application_id == application_id)
            .order_by(HistoryEvent.date.desc(), HistoryEvent.id.desc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                events = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Database error reading history of {application_id}: {e}")
            raise StorageError("list_history", str(e)) from e

        return [HistoryEventRead.model_validate(event) for event in events]

    async def list_global_history(self, limit: int = 10) -> list[GlobalHistoryItem]:
        """The ``limit`` most recent events across all applications."""
        query = (
            select(HistoryEvent, Application.company, Application.title)
            .join(Application, HistoryEvent.application_id == Application.id)
            .order_by(HistoryEvent.date.desc(), HistoryEvent.id.desc())
            .limit(limit)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Database error reading global history: {e}")
            raise StorageError("list_global_history", str(e)) from e

        return [
            GlobalHistoryItem(
                id=event.id,
                application_id=event.application_id,
                status=event.status,
                date=event.date,
                company=company,
                title=title,
            )
            for event, company, title in rows
        ]


# Global application service instance
application_service = ApplicationService()


async def get_application_service() -> ApplicationService:
    """Dependency to get application service."""
    return application_service
