"""Dashboard aggregations over applications and their history.

All functions are pure: they take plain row snapshots and recompute from
scratch on every call. Day differences are fractional days
(``timedelta / 1 day``), averaged without rounding.
"""

import re
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from applytics.schemas.analytics import (
    CumulativePoint,
    KeywordCount,
    MonthlyInterviewRate,
    ResponseTimeBucket,
    StatusCount,
    WeeklyCount,
    WeeklyTrend,
)

INTERVIEW_STATUSES = frozenset({"Interview", "Offer", "Accepted"})

# Statuses that do not count as a reply from the employer.
NON_SUBSTANTIVE_STATUSES = frozenset({"Applied", "Withdrawn", "Online Assessment"})

STOP_WORDS = frozenset(
    {"and", "or", "the", "in", "at", "of", "for", "with", "a", "an", "to", "on", "by", "sr", "jr"}
)

TREND_WINDOW = timedelta(days=30)
WEEKS_PER_WINDOW = 30 / 7

RESPONSE_BUCKETS = (
    ("<7", 7),
    ("7-13", 14),
    ("14-29", 30),
    (">=30", None),
)

_NON_ALNUM = re.compile(r"[\W_]+")


@dataclass(frozen=True, slots=True)
class ApplicationRow:
    id: int
    title: str
    status: str
    date_applied: datetime


@dataclass(frozen=True, slots=True)
class EventRow:
    id: int
    application_id: int
    status: str
    date: datetime


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start) / timedelta(days=1)


# ---------------------------------------------------------------------------
# point-in-time figures
# ---------------------------------------------------------------------------


def status_distribution(applications: Iterable[ApplicationRow]) -> list[StatusCount]:
    """Count applications per current status, ordered by status label."""
    counts = Counter(app.status for app in applications)
    return [StatusCount(status=status, count=counts[status]) for status in sorted(counts)]


def tokenize_title(title: str) -> list[str]:
    """Split a job title into display keywords."""
    words = _NON_ALNUM.sub(" ", title.lower()).split()
    return [
        word[0].upper() + word[1:]
        for word in words
        if len(word) > 2 and word not in STOP_WORDS
    ]


def keyword_frequency(titles: Iterable[str], limit: int = 10) -> list[KeywordCount]:
    """Most frequent title keywords; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for title in titles:
        counts.update(tokenize_title(title))
    return [
        KeywordCount(keyword=keyword, count=count)
        for keyword, count in counts.most_common(limit)
    ]


def interviewed_ids(events: Iterable[EventRow]) -> set[int]:
    """Applications that ever reached an interview-or-later status."""
    return {event.application_id for event in events if event.status in INTERVIEW_STATUSES}


def interview_rate(
    applications: Sequence[ApplicationRow], events: Iterable[EventRow]
) -> float:
    """Share of applications (in percent) that reached an interview."""
    if not applications:
        return 0.0
    reached = interviewed_ids(events)
    hits = sum(1 for app in applications if app.id in reached)
    return hits / len(applications) * 100


def first_response_days(
    applications: Iterable[ApplicationRow], events: Iterable[EventRow]
) -> dict[int, float]:
    """Days from ``date_applied`` to the first substantive event, per application.

    Applications without a substantive event are absent from the result.
    Events dated before ``date_applied`` count as a same-day response.
    """
    first: dict[int, EventRow] = {}
    for event in events:
        if event.status in NON_SUBSTANTIVE_STATUSES:
            continue
        current = first.get(event.application_id)
        if current is None or (event.date, event.id) < (current.date, current.id):
            first[event.application_id] = event

    return {
        app.id: max(0.0, _days_between(app.date_applied, first[app.id].date))
        for app in applications
        if app.id in first
    }


def average_response_time(
    applications: Iterable[ApplicationRow], events: Iterable[EventRow]
) -> float | None:
    """Mean of ``first_response_days``; ``None`` when nobody has responded."""
    days = list(first_response_days(applications, events).values())
    if not days:
        return None
    return sum(days) / len(days)


def weekly_trend(applications: Iterable[ApplicationRow], now: datetime) -> WeeklyTrend:
    """Weekly application rate of the last 30 days against the 30 days before."""
    current_start = now - TREND_WINDOW
    previous_start = current_start - TREND_WINDOW

    current = 0
    previous = 0
    for app in applications:
        if current_start <= app.date_applied <= now:
            current += 1
        elif previous_start <= app.date_applied < current_start:
            previous += 1

    if current > previous:
        trend = "up"
    elif current < previous:
        trend = "down"
    else:
        trend = "neutral"

    return WeeklyTrend(
        current=round(current / WEEKS_PER_WINDOW, 1),
        previous=round(previous / WEEKS_PER_WINDOW, 1),
        trend=trend,
    )


# ---------------------------------------------------------------------------
# time series
# ---------------------------------------------------------------------------


def cumulative_applications(
    applications: Iterable[ApplicationRow],
) -> list[CumulativePoint]:
    """Daily application counts with a running total, oldest day first."""
    per_day: Counter[date] = Counter(app.date_applied.date() for app in applications)

    points = []
    running = 0
    for day in sorted(per_day):
        running += per_day[day]
        points.append(CumulativePoint(day=day, count=per_day[day], cumulative=running))
    return points


def applications_per_week(applications: Iterable[ApplicationRow]) -> list[WeeklyCount]:
    """Application counts per ISO (year, week), ascending."""
    per_week: Counter[tuple[int, int]] = Counter()
    for app in applications:
        iso = app.date_applied.isocalendar()
        per_week[(iso.year, iso.week)] += 1

    return [
        WeeklyCount(year=year, week=week, label=f"{year}-W{week:02d}", count=count)
        for (year, week), count in sorted(per_week.items())
    ]


def interview_rate_over_time(
    applications: Iterable[ApplicationRow], events: Iterable[EventRow]
) -> list[MonthlyInterviewRate]:
    """Interview conversion per month of ``date_applied``."""
    reached = interviewed_ids(events)
    months: dict[tuple[int, int], set[int]] = defaultdict(set)
    for app in applications:
        months[(app.date_applied.year, app.date_applied.month)].add(app.id)

    series = []
    for (year, month), ids in sorted(months.items()):
        interviewed = len(ids & reached)
        series.append(
            MonthlyInterviewRate(
                year=year,
                month=month,
                label=f"{year}-{month:02d}",
                total=len(ids),
                interviewed=interviewed,
                rate=interviewed / len(ids) * 100,
            )
        )
    return series


def response_time_distribution(
    applications: Iterable[ApplicationRow], events: Iterable[EventRow]
) -> list[ResponseTimeBucket]:
    """Histogram of first-response latency in four fixed buckets."""
    counts = {label: 0 for label, _ in RESPONSE_BUCKETS}
    for days in first_response_days(applications, events).values():
        for label, upper in RESPONSE_BUCKETS:
            if upper is None or days < upper:
                counts[label] += 1
                break
    return [ResponseTimeBucket(bucket=label, count=counts[label]) for label, _ in RESPONSE_BUCKETS]
