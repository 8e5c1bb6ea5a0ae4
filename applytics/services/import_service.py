"""Reconciliation importer: insert-or-merge a batch of external rows."""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from applytics.core.exceptions import StorageError
from applytics.core.storage import async_session
from applytics.models.application import DEFAULT_STATUS, Application
from applytics.schemas.importer import ImportCandidate, ImportResult
from applytics.services.history import new_application, touch
from applytics.utils.dates import utc_now
from applytics.utils.tabular import rows_to_candidates

logger = logging.getLogger(__name__)


def natural_key(company: str, title: str) -> tuple[str, str]:
    """Key used to recognise an existing application.

    Exact, case-sensitive match on the stored strings.
    """
    return company, title


class ImportService:
    """Import candidate rows in one transaction.

    A row matching an existing (company, title) overwrites that application's
    status, date_applied, process_steps, outcome and notes without writing
    history; a new row is created with its creation event.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory or async_session
        self._clock = clock

    async def _find_existing(
        self, session: AsyncSession, company: str, title: str
    ) -> Application | None:
        result = await session.execute(
            select(Application)
            .where(Application.company == company, Application.title == title)
            .order_by(Application.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def import_rows(self, candidates: Sequence[ImportCandidate]) -> ImportResult:
        """Reconcile ``candidates`` in batch order; all rows commit together."""
        valid = [candidate for candidate in candidates if candidate.is_valid()]
        skipped = len(candidates) - len(valid)
        if skipped:
            logger.info(f"Dropping {skipped} import row(s) without company or title")

        added = 0
        updated = 0
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    now = self._clock()
                    for candidate in valid:
                        company, title = natural_key(candidate.company, candidate.title)
                        status = candidate.status or DEFAULT_STATUS
                        date_applied = candidate.date_applied or now

                        existing = await self._find_existing(session, company, title)
                        if existing is not None:
                            existing.status = status
                            existing.date_applied = date_applied
                            existing.process_steps = list(candidate.process_steps or [])
                            existing.outcome = candidate.outcome or None
                            existing.notes = candidate.notes or ""
                            touch(existing, now)
                            updated += 1
                        else:
                            session.add(
                                new_application(
                                    company=company,
                                    title=title,
                                    now=now,
                                    status=status,
                                    date_applied=date_applied,
                                    process_steps=candidate.process_steps,
                                    outcome=candidate.outcome,
                                    notes=candidate.notes,
                                )
                            )
                            # later rows in the same batch must see this one
                            await session.flush()
                            added += 1
        except SQLAlchemyError as e:
            logger.error(f"Database error during import, batch rolled back: {e}")
            raise StorageError("import", str(e)) from e

        logger.info(f"Import finished: {added} added, {updated} updated, {skipped} skipped")
        return ImportResult(added=added, updated=updated, skipped=skipped)

    async def import_table(
        self,
        headers: list[str],
        rows: list[list],
        mapping: dict[str, str] | None = None,
    ) -> ImportResult:
        """Map a header + positional-rows table to candidates, then import."""
        candidates, rejected = rows_to_candidates(headers, rows, mapping)
        result = await self.import_rows(candidates)
        result.skipped += rejected
        return result


# Global import service instance
import_service = ImportService()


async def get_import_service() -> ImportService:
    """Dependency to get import service."""
    return import_service
