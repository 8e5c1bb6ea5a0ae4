"""Application and status-history models."""

from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from applytics.core.storage import Base

DEFAULT_STATUS = "Applied"


def _utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


class Application(Base):
    """A single tracked job application.

    ``status`` is a plain string on purpose: it is not tied to the status
    catalog, so labels removed from the catalog stay valid here.
    """

    __tablename__ = "applications"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(100), nullable=False, default=DEFAULT_STATUS, index=True
    )
    date_applied: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now, index=True
    )
    process_steps: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    current_step_index: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_updated: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now, index=True
    )

    history: Mapped[list["HistoryEvent"]] = relationship(
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="HistoryEvent.id",
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, company='{self.company}', "
            f"title='{self.title}', status='{self.status}')>"
        )


class HistoryEvent(Base):
    """One status transition of an application.

    Rows are append-only; the only rewrite is the ``date`` of the lowest-id
    event when ``date_applied`` changes.
    """

    __tablename__ = "history"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(100), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now, index=True
    )

    application: Mapped["Application"] = relationship(back_populates="history")

    def __repr__(self) -> str:
        return (
            f"<HistoryEvent(id={self.id}, app_id={self.application_id}, "
            f"status='{self.status}', date={self.date})>"
        )
