"""Tests for the HTTP API."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from applytics.core.exceptions import StorageError


@pytest.fixture
def api_client(db_url, clock):
    """TestClient wired to a throwaway database and the fake clock."""
    from applytics.core.storage import (
        SettingsStorage,
        build_engine,
        build_session_factory,
        init_models,
    )
    from applytics.main import app
    from applytics.routers.catalog import get_settings_storage
    from applytics.services.analytics_service import (
        AnalyticsService,
        get_analytics_service,
    )
    from applytics.services.application_service import (
        ApplicationService,
        get_application_service,
    )
    from applytics.services.catalog_service import (
        StatusCatalogService,
        get_status_catalog_service,
    )
    from applytics.services.import_service import ImportService, get_import_service

    engine = build_engine(db_url, poolclass=NullPool)
    factory = build_session_factory(engine)

    app.dependency_overrides[get_application_service] = lambda: ApplicationService(
        factory, clock
    )
    app.dependency_overrides[get_status_catalog_service] = lambda: StatusCatalogService(
        factory, clock
    )
    app.dependency_overrides[get_import_service] = lambda: ImportService(factory, clock)
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(
        factory, clock
    )
    app.dependency_overrides[get_settings_storage] = lambda: SettingsStorage(factory)

    with patch("applytics.main.init_models", lambda: init_models(engine)):
        with TestClient(app) as client:
            yield client

    app.dependency_overrides.clear()


def _create(client, **fields):
    payload = {"company": "Acme", "title": "Engineer", "date_applied": "2024-01-01"}
    payload.update(fields)
    response = client.post("/applications", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


class TestServiceEndpoints:
    """Tests for the informational endpoints."""

    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "applytics"}

    def test_api_info(self, api_client):
        response = api_client.get("/api")
        assert response.status_code == 200
        assert response.json()["message"] == "Applytics API"


class TestApplicationEndpoints:
    """Tests for /applications."""

    def test_create_and_get(self, api_client):
        """Test creating then reading an application."""
        app_id = _create(api_client, process_steps=["Phone"], notes="hello")

        response = api_client.get(f"/applications/{app_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["company"] == "Acme"
        assert data["status"] == "Applied"
        assert data["date_applied"] == "2024-01-01T00:00:00"
        assert data["process_steps"] == ["Phone"]
        assert data["notes"] == "hello"

    def test_create_blank_company(self, api_client):
        """Test that a blank company is a 400."""
        response = api_client.post("/applications", json={"company": " ", "title": "Engineer"})
        assert response.status_code == 400
        assert "company" in response.json()["detail"]

    def test_create_missing_title(self, api_client):
        response = api_client.post("/applications", json={"company": "Acme"})
        assert response.status_code == 422

    def test_numeric_date_rejected(self, api_client):
        """Test that spreadsheet serial numbers are only accepted by the importer."""
        response = api_client.post(
            "/applications",
            json={"company": "Acme", "title": "Engineer", "date_applied": 45292},
        )
        assert response.status_code == 422

        app_id = _create(api_client)
        response = api_client.patch(f"/applications/{app_id}", json={"date_applied": 45300})
        assert response.status_code == 422

    def test_get_missing(self, api_client):
        response = api_client.get("/applications/999")
        assert response.status_code == 404

    def test_update_status_writes_history(self, api_client, clock):
        """Test PATCH followed by history listing."""
        from datetime import datetime

        app_id = _create(api_client)
        clock.set(datetime(2024, 1, 10))

        response = api_client.patch(f"/applications/{app_id}", json={"status": "Interview"})
        assert response.status_code == 204

        history = api_client.get(f"/applications/{app_id}/history").json()
        assert [(h["status"], h["date"]) for h in history] == [
            ("Interview", "2024-01-10T00:00:00"),
            ("Applied", "2024-01-01T00:00:00"),
        ]

    def test_update_missing(self, api_client):
        response = api_client.patch("/applications/999", json={"notes": "x"})
        assert response.status_code == 404

    def test_update_blank_status(self, api_client):
        app_id = _create(api_client)
        response = api_client.patch(f"/applications/{app_id}", json={"status": ""})
        assert response.status_code == 400

    def test_delete_is_idempotent(self, api_client):
        """Test that DELETE succeeds twice and removes history."""
        app_id = _create(api_client)

        assert api_client.delete(f"/applications/{app_id}").status_code == 204
        assert api_client.delete(f"/applications/{app_id}").status_code == 204
        assert api_client.get(f"/applications/{app_id}/history").json() == []
        assert api_client.get("/applications").json() == []

    def test_global_history_limit(self, api_client):
        """Test the activity feed with an explicit limit."""
        for n in range(4):
            _create(api_client, company=f"Company {n}")

        feed = api_client.get("/history?limit=3").json()

        assert len(feed) == 3
        assert {"company", "title", "status", "date", "application_id"} <= set(feed[0])

    def test_global_history_limit_bounds(self, api_client):
        assert api_client.get("/history?limit=0").status_code == 422

    def test_storage_failure_is_500(self, api_client):
        """Test that storage errors map to a 500."""
        from applytics.main import app
        from applytics.services.application_service import get_application_service

        failing = AsyncMock()
        failing.list_applications.side_effect = StorageError("list", "disk I/O error")
        app.dependency_overrides[get_application_service] = lambda: failing

        response = api_client.get("/applications")

        assert response.status_code == 500
        assert response.json()["detail"] == "Database error"


class TestImportEndpoints:
    """Tests for /import."""

    def test_import_merges_and_adds(self, api_client):
        """Test one matching row and one new row."""
        app_id = _create(api_client)

        response = api_client.post(
            "/import",
            json={
                "rows": [
                    {"company": "Acme", "title": "Engineer", "status": "Offer"},
                    {"company": "Globex", "title": "Analyst"},
                    {"title": "No company"},
                ]
            },
        )

        assert response.status_code == 200
        assert response.json() == {"added": 1, "updated": 1, "skipped": 1}
        assert len(api_client.get(f"/applications/{app_id}/history").json()) == 1

    def test_import_table(self, api_client):
        response = api_client.post(
            "/import/table",
            json={
                "headers": ["Company", "Position Title", "Date"],
                "rows": [["Acme", "Engineer", 45292], ["Globex", "Analyst", "bad"]],
            },
        )

        assert response.status_code == 200
        assert response.json() == {"added": 1, "updated": 0, "skipped": 1}


class TestCatalogEndpoints:
    """Tests for /statuses."""

    def test_default_catalog(self, api_client):
        statuses = api_client.get("/statuses").json()["statuses"]
        assert statuses[:3] == ["Applied", "Online Assessment", "Screening"]

    def test_add_reorder_reset(self, api_client):
        """Test the catalog edit cycle."""
        added = api_client.post("/statuses", json={"label": "Ghosted"}).json()["statuses"]
        assert added[-1] == "Ghosted"

        reordered = api_client.put(
            "/statuses", json={"statuses": ["Ghosted", "Applied"]}
        ).json()["statuses"]
        assert reordered == ["Ghosted", "Applied"]

        reset = api_client.post("/statuses/reset").json()["statuses"]
        assert "Ghosted" not in reset

    def test_add_empty_label(self, api_client):
        assert api_client.post("/statuses", json={"label": ""}).status_code == 422

    def test_usage_and_delete_with_migration(self, api_client):
        """Test deleting an in-use label while moving its applications."""
        app_id = _create(api_client, status="Screening")
        assert api_client.get("/statuses/Screening/usage").json() == {
            "status": "Screening",
            "count": 1,
        }

        response = api_client.delete("/statuses/Screening?migrate_to=Interview")

        assert response.status_code == 200
        assert "Screening" not in response.json()["statuses"]
        assert api_client.get(f"/applications/{app_id}").json()["status"] == "Interview"

    def test_delete_without_migration_orphans_label(self, api_client):
        app_id = _create(api_client, status="Screening")

        api_client.delete("/statuses/Screening")

        assert api_client.get(f"/applications/{app_id}").json()["status"] == "Screening"

    def test_migrate(self, api_client):
        for n in range(3):
            _create(api_client, company=f"Company {n}", status="Interview")

        response = api_client.post(
            "/statuses/migrate", json={"old_status": "Interview", "new_status": "Offer"}
        )

        assert response.json() == {"migrated": 3}


class TestSettingsEndpoints:
    """Tests for /settings."""

    def test_save_and_list(self, api_client):
        response = api_client.put("/settings/theme", json={"value": "dark"})
        assert response.status_code == 200
        assert response.json() == {"status": "success", "key": "theme"}

        assert api_client.get("/settings").json()["theme"] == "dark"


    def test_catalog_key_goes_through_catalog(self, api_client):
        """Test that saving the catalog key keeps labels unique and non-blank."""
        response = api_client.put(
            "/settings/statuses", json={"value": ["Applied", "Applied", ""]}
        )
        assert response.status_code == 400

        response = api_client.put(
            "/settings/statuses", json={"value": ["Offer", "Applied", "Offer"]}
        )
        assert response.status_code == 200
        assert api_client.get("/statuses").json()["statuses"] == ["Offer", "Applied"]

    def test_catalog_key_must_be_a_list(self, api_client):
        response = api_client.put("/settings/statuses", json={"value": "Applied"})
        assert response.status_code == 400
        assert api_client.get("/statuses").json()["statuses"][0] == "Applied"


class TestAnalyticsEndpoints:
    """Tests for /stats and /analytics."""

    def test_stats(self, api_client, clock):
        from datetime import datetime

        app_id = _create(api_client)
        clock.set(datetime(2024, 1, 10))
        api_client.patch(f"/applications/{app_id}", json={"status": "Interview"})

        stats = api_client.get("/stats").json()

        assert stats["total"] == 1
        assert stats["interview_rate"] == 100.0
        assert stats["avg_response_time"] == 9.0
        assert stats["weekly_trend"]["trend"] == "up"

    def test_analytics(self, api_client):
        _create(api_client)

        data = api_client.get("/analytics").json()

        assert data["cumulative"] == [{"day": "2024-01-01", "count": 1, "cumulative": 1}]
        assert data["per_week"][0]["label"] == "2024-W01"
        assert len(data["response_time_distribution"]) == 4
