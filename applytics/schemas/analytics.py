"""Schemas for dashboard statistics and time series."""

from datetime import date
from typing import Literal

from pydantic import BaseModel


class StatusCount(BaseModel):
    status: str
    count: int


class KeywordCount(BaseModel):
    keyword: str
    count: int


class WeeklyTrend(BaseModel):
    """Applications per week over the last 30 days against the 30 before."""

    current: float
    previous: float
    trend: Literal["up", "down", "neutral"]


class StatsResponse(BaseModel):
    """Point-in-time dashboard figures."""

    total: int
    by_status: list[StatusCount]
    by_keyword: list[KeywordCount]
    interview_rate: float
    avg_response_time: float | None
    weekly_trend: WeeklyTrend


class CumulativePoint(BaseModel):
    day: date
    count: int
    cumulative: int


class WeeklyCount(BaseModel):
    year: int
    week: int
    label: str
    count: int


class MonthlyInterviewRate(BaseModel):
    year: int
    month: int
    label: str
    total: int
    interviewed: int
    rate: float


class ResponseTimeBucket(BaseModel):
    bucket: str
    count: int


class AnalyticsResponse(BaseModel):
    """Time-series dashboard figures."""

    cumulative: list[CumulativePoint]
    per_week: list[WeeklyCount]
    interview_rate_over_time: list[MonthlyInterviewRate]
    response_time_distribution: list[ResponseTimeBucket]
