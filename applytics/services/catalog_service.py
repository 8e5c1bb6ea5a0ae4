"""Status catalog: the user-editable, ordered list of selectable statuses."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from applytics.core.exceptions import StorageError, ValidationError
from applytics.core.storage import SettingsStorage, async_session
from applytics.models.application import Application
from applytics.services.history import record_transition, touch
from applytics.utils.dates import utc_now

logger = logging.getLogger(__name__)

CATALOG_KEY = "statuses"

DEFAULT_STATUSES = (
    "Applied",
    "Online Assessment",
    "Screening",
    "Interview",
    "Offer",
    "Rejected",
    "Online Assessment Expired",
    "Withdrawn",
)


def _dedupe(labels: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for label in labels:
        seen.setdefault(label, None)
    return list(seen)


def _clean(labels: Iterable[object]) -> list[str]:
    """Stringify, drop blank labels and keep the first of each duplicate."""
    return _dedupe(
        str(label) for label in labels if label is not None and str(label).strip()
    )


class StatusCatalogService:
    """Manage the status catalog.

    The catalog never constrains stored data: removing a label leaves any
    application or history row holding it untouched. Relabelling existing rows
    is an explicit separate step (``bulk_migrate``).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory or async_session
        self._clock = clock

    async def _load(self, session: AsyncSession) -> list[str]:
        stored = await SettingsStorage.read(session, CATALOG_KEY)
        if isinstance(stored, list):
            labels = _clean(stored)
            if labels != stored:
                await SettingsStorage.write(session, CATALOG_KEY, labels)
                logger.warning("Repaired stored status catalog (blank or duplicate labels)")
            return labels

        if stored is not None:
            logger.warning(
                f"Stored status catalog is not a list ({type(stored).__name__}), "
                "replacing it with defaults"
            )
        defaults = list(DEFAULT_STATUSES)
        await SettingsStorage.write(session, CATALOG_KEY, defaults)
        logger.info("Initialised status catalog with defaults")
        return defaults

    async def _mutate(
        self, operation: str, change: Callable[[list[str]], list[str]]
    ) -> list[str]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    current = await self._load(session)
                    updated = change(list(current))
                    if updated != current:
                        await SettingsStorage.write(session, CATALOG_KEY, updated)
        except SQLAlchemyError as e:
            logger.error(f"Database error during catalog {operation}: {e}")
            raise StorageError(f"catalog {operation}", str(e)) from e
        return updated

    async def get(self) -> list[str]:
        """Current catalog; persists the defaults on first use."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    return await self._load(session)
        except SQLAlchemyError as e:
            logger.error(f"Database error reading status catalog: {e}")
            raise StorageError("catalog get", str(e)) from e

    async def add(self, label: str) -> list[str]:
        """Append ``label`` unless it is already present."""
        if not label or not label.strip():
            raise ValidationError("label")

        def change(labels: list[str]) -> list[str]:
            if label in labels:
                return labels
            return [*labels, label]

        statuses = await self._mutate("add", change)
        logger.info(f"Status catalog add '{label}'")
        return statuses

    async def remove(self, label: str) -> list[str]:
        """Drop ``label`` from the catalog only; data rows keep their values."""
        statuses = await self._mutate(
            "remove", lambda labels: [s for s in labels if s != label]
        )
        logger.info(f"Status catalog remove '{label}'")
        return statuses

    async def reset(self) -> list[str]:
        """Restore the built-in catalog without touching data rows."""
        statuses = await self._mutate("reset", lambda labels: list(DEFAULT_STATUSES))
        logger.info("Status catalog reset to defaults")
        return statuses

    async def set_order(self, labels: list[str]) -> list[str]:
        """Replace the catalog with ``labels`` (first occurrence of a duplicate wins)."""
        if any(not label or not label.strip() for label in labels):
            raise ValidationError("statuses", "Status labels must not be empty")

        ordered = _dedupe(labels)
        statuses = await self._mutate("reorder", lambda current: ordered)
        logger.info(f"Status catalog reordered ({len(statuses)} labels)")
        return statuses

    async def usage(self, label: str) -> int:
        """Number of applications whose current status is ``label``."""
        query = select(func.count()).select_from(Application).where(
            Application.status == label
        )
        try:
            async with self._session_factory() as session:
                return (await session.execute(query)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Database error counting usage of '{label}': {e}")
            raise StorageError("catalog usage", str(e)) from e

    async def bulk_migrate(self, old_status: str, new_status: str) -> int:
        """Move every application at ``old_status`` to ``new_status``.

        Each moved application gets one history event. All rows change in one
        transaction or none do. Returns the number of applications moved.
        """
        if not new_status or not new_status.strip():
            raise ValidationError("new_status")
        if old_status == new_status:
            return 0

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        select(Application)
                        .where(Application.status == old_status)
                        .order_by(Application.id)
                    )
                    applications = result.scalars().all()

                    now = self._clock()
                    for application in applications:
                        application.status = new_status
                        touch(application, now)
                        record_transition(
                            session, application, old_status, new_status, now
                        )
        except SQLAlchemyError as e:
            logger.error(
                f"Database error migrating '{old_status}' -> '{new_status}': {e}"
            )
            raise StorageError("catalog migrate", str(e)) from e

        logger.info(
            f"Migrated {len(applications)} application(s) "
            f"from '{old_status}' to '{new_status}'"
        )
        return len(applications)

    async def retire(self, label: str, migrate_to: str | None = None) -> int:
        """Remove ``label``, first relabelling its applications when asked to."""
        migrated = 0
        if migrate_to:
            migrated = await self.bulk_migrate(label, migrate_to)
        await self.remove(label)
        return migrated


# Global status catalog service instance
status_catalog_service = StatusCatalogService()


async def get_status_catalog_service() -> StatusCatalogService:
    """Dependency to get status catalog service."""
    return status_catalog_service
