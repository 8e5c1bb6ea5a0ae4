"""Status-history bookkeeping shared by every write path.

Rules:
- a new application gets exactly one creation event dated ``date_applied``;
- a status change appends one event dated "now", a repeated status appends none;
- editing ``date_applied`` moves the date of the lowest-id event of that
  application. Lowest id is the creation event as long as events are only ever
  appended in chronological order.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from applytics.models.application import DEFAULT_STATUS, Application, HistoryEvent

logger = logging.getLogger(__name__)


def new_application(
    *,
    company: str,
    title: str,
    now: datetime,
    status: str | None = None,
    date_applied: datetime | None = None,
    process_steps: list[str] | None = None,
    outcome: str | None = None,
    notes: str | None = None,
) -> Application:
    """Build a pending application together with its creation event."""
    status = status or DEFAULT_STATUS
    date_applied = date_applied or now

    application = Application(
        company=company,
        title=title,
        status=status,
        date_applied=date_applied,
        process_steps=list(process_steps or []),
        current_step_index=0,
        outcome=outcome or None,
        notes=notes or "",
        last_updated=now,
    )
    application.history.append(HistoryEvent(status=status, date=date_applied))
    return application


def touch(application: Application, now: datetime) -> None:
    """Bump ``last_updated`` without ever moving it backwards."""
    previous = application.last_updated
    application.last_updated = now if previous is None else max(previous, now)


def record_transition(
    session: AsyncSession,
    application: Application,
    previous_status: str,
    new_status: str,
    now: datetime,
) -> HistoryEvent | None:
    """Append an event when ``new_status`` differs from ``previous_status``."""
    if new_status == previous_status:
        return None

    event = HistoryEvent(application_id=application.id, status=new_status, date=now)
    session.add(event)
    logger.debug(
        f"Application {application.id}: '{previous_status}' -> '{new_status}'"
    )
    return event


async def rewrite_origin_date(
    session: AsyncSession, application_id: int, date_applied: datetime
) -> HistoryEvent | None:
    """Align the first inserted event of an application with ``date_applied``."""
    query = (
        select(HistoryEvent)
        .where(HistoryEvent.application_id == application_id)
        .order_by(HistoryEvent.id.asc())
        .limit(1)
    )
    result = await session.execute(query)
    first = result.scalar_one_or_none()

    if first is None:
        logger.debug(f"Application {application_id} has no history to realign")
        return None

    first.date = date_applied
    return first
