"""Tests for database models."""

from datetime import UTC, datetime

from applytics.models.application import DEFAULT_STATUS, Application, HistoryEvent
from applytics.models.setting import Setting


def _utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


class TestApplication:
    """Tests for Application model."""

    def test_model_creation(self):
        """Test creating Application instance."""
        app = Application(
            company="Acme",
            title="Engineer",
            status="Interview",
            date_applied=_utc_now(),
            process_steps=["Phone screen"],
            notes="",
        )
        assert app.company == "Acme"
        assert app.title == "Engineer"
        assert app.status == "Interview"
        assert app.process_steps == ["Phone screen"]

    def test_outcome_optional(self):
        """Test that outcome defaults to None."""
        app = Application(company="Acme", title="Engineer")
        assert app.outcome is None

    def test_history_starts_empty(self):
        """Test that a transient application has no history."""
        app = Application(company="Acme", title="Engineer")
        assert app.history == []

    def test_history_back_reference(self):
        """Test that appending an event links it to the application."""
        app = Application(company="Acme", title="Engineer")
        event = HistoryEvent(status=DEFAULT_STATUS, date=_utc_now())
        app.history.append(event)
        assert event.application is app

    def test_repr(self):
        app = Application(id=3, company="Acme", title="Engineer", status="Offer")
        assert repr(app) == "<Application(id=3, company='Acme', title='Engineer', status='Offer')>"

    def test_status_column_is_plain_string(self):
        """Test that status carries no foreign key to the catalog."""
        column = Application.__table__.c.status
        assert not column.foreign_keys
        assert column.nullable is False


class TestHistoryEvent:
    """Tests for HistoryEvent model."""

    def test_model_creation(self):
        """Test creating HistoryEvent instance."""
        when = datetime(2024, 1, 1)
        event = HistoryEvent(application_id=1, status="Applied", date=when)
        assert event.application_id == 1
        assert event.status == "Applied"
        assert event.date == when

    def test_foreign_key_cascades(self):
        """Test that history rows are removed with their application."""
        [fk] = HistoryEvent.__table__.c.application_id.foreign_keys
        assert fk.column.table.name == "applications"
        assert fk.ondelete == "CASCADE"

    def test_repr(self):
        event = HistoryEvent(id=9, application_id=3, status="Offer", date=datetime(2024, 1, 1))
        assert "app_id=3" in repr(event)
        assert "Offer" in repr(event)


class TestSetting:
    """Tests for Setting model."""

    def test_model_creation(self):
        setting = Setting(key="theme", value="dark")
        assert setting.key == "theme"
        assert setting.value == "dark"

    def test_table_name(self):
        assert Setting.__tablename__ == "settings"
