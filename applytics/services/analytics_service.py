"""Read-side service that feeds the dashboard."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from applytics.core.config import settings
from applytics.core.exceptions import StorageError
from applytics.core.storage import async_session
from applytics.models.application import Application, HistoryEvent
from applytics.schemas.analytics import AnalyticsResponse, StatsResponse
from applytics.services import analytics
from applytics.services.analytics import ApplicationRow, EventRow
from applytics.utils.dates import utc_now

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Compute dashboard figures from the current store contents.

    Nothing is cached; each call reads a fresh snapshot.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        clock: Callable[[], datetime] = utc_now,
        keyword_limit: int | None = None,
    ):
        self._session_factory = session_factory or async_session
        self._clock = clock
        self._keyword_limit = keyword_limit or settings.keyword_limit

    async def _snapshot(self) -> tuple[list[ApplicationRow], list[EventRow]]:
        """Read applications and history inside one read transaction."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    app_rows = await session.execute(
                        select(
                            Application.id,
                            Application.title,
                            Application.status,
                            Application.date_applied,
                        )
                    )
                    event_rows = await session.execute(
                        select(
                            HistoryEvent.id,
                            HistoryEvent.application_id,
                            HistoryEvent.status,
                            HistoryEvent.date,
                        )
                    )
                    applications = [ApplicationRow(*row) for row in app_rows.all()]
                    events = [EventRow(*row) for row in event_rows.all()]
        except SQLAlchemyError as e:
            logger.error(f"Database error reading analytics snapshot: {e}")
            raise StorageError("analytics", str(e)) from e

        logger.debug(
            f"Analytics snapshot: {len(applications)} applications, {len(events)} events"
        )
        return applications, events

    async def get_stats(self) -> StatsResponse:
        """Status distribution, keywords, interview rate, response time, trend."""
        applications, events = await self._snapshot()

        return StatsResponse(
            total=len(applications),
            by_status=analytics.status_distribution(applications),
            by_keyword=analytics.keyword_frequency(
                (app.title for app in applications), self._keyword_limit
            ),
            interview_rate=analytics.interview_rate(applications, events),
            avg_response_time=analytics.average_response_time(applications, events),
            weekly_trend=analytics.weekly_trend(applications, self._clock()),
        )

    async def get_analytics(self) -> AnalyticsResponse:
        """Cumulative, weekly and monthly series plus the response histogram."""
        applications, events = await self._snapshot()

        return AnalyticsResponse(
            cumulative=analytics.cumulative_applications(applications),
            per_week=analytics.applications_per_week(applications),
            interview_rate_over_time=analytics.interview_rate_over_time(
                applications, events
            ),
            response_time_distribution=analytics.response_time_distribution(
                applications, events
            ),
        )


# Global analytics service instance
analytics_service = AnalyticsService()


async def get_analytics_service() -> AnalyticsService:
    """Dependency to get analytics service."""
    return analytics_service
