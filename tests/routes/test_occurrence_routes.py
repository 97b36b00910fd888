"""Integration tests for occurrence endpoints."""

from datetime import date

import pytest

from tests.fixtures.events import create_base_event, create_rule


@pytest.fixture
def seeded_client(client_with_service):
    """Provide a client whose service holds a weekly series and a single event."""
    client, service = client_with_service
    service.store.create_event(
        create_base_event(
            id="weekly-1",
            title="Weekly Review",
            repeat=create_rule("weekly", end_date=date(2025, 10, 29)),
        )
    )
    service.store.create_event(
        create_base_event(
            id="single-1",
            title="Dentist",
            date=date(2025, 10, 2),
            start_time="14:00",
            end_time="15:00",
        )
    )
    return client, service


class TestListOccurrences:
    """Test GET /api/occurrences."""

    def test_explicit_window(self, seeded_client):
        """Verify occurrences for a start/end window."""
        client, _ = seeded_client

        response = client.get(
            "/api/occurrences", params={"start": "2025-10-01", "end": "2025-10-10"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [o["id"] for o in data["occurrences"]] == [
            "weekly-1::2025-10-01::0",
            "single-1",
            "weekly-1::2025-10-08::0",
        ]
        assert data["occurrences"][0]["original_id"] == "weekly-1"
        assert data["occurrences"][1]["original_id"] is None

    def test_week_view(self, seeded_client):
        """Verify a week view derives its Sunday to Saturday window."""
        client, _ = seeded_client

        response = client.get(
            "/api/occurrences", params={"view": "week", "date": "2025-10-15"}
        )

        data = response.json()
        assert data["start"] == "2025-10-12"
        assert data["end"] == "2025-10-18"
        assert [o["date"] for o in data["occurrences"]] == ["2025-10-15"]

    def test_month_view(self, seeded_client):
        """Verify a month view covers the whole month."""
        client, _ = seeded_client

        data = client.get(
            "/api/occurrences", params={"view": "month", "date": "2025-10-20"}
        ).json()

        assert (data["start"], data["end"]) == ("2025-10-01", "2025-10-31")
        assert data["count"] == 6

    def test_inverted_window(self, seeded_client):
        """Verify an inverted window is empty, not an error."""
        client, _ = seeded_client

        response = client.get(
            "/api/occurrences", params={"start": "2025-10-31", "end": "2025-10-01"}
        )

        assert response.status_code == 200
        assert response.json()["count"] == 0

    def test_missing_window(self, seeded_client):
        """Verify a request without window or view is rejected."""
        client, _ = seeded_client

        response = client.get("/api/occurrences", params={"start": "2025-10-01"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid Value"

    def test_unknown_view(self, seeded_client):
        """Verify an unknown view name fails validation."""
        client, _ = seeded_client

        response = client.get("/api/occurrences", params={"view": "year"})

        assert response.status_code == 422

    def test_view_without_date(self, seeded_client):
        """Verify a view needs a caller-supplied date."""
        client, _ = seeded_client

        response = client.get("/api/occurrences", params={"view": "week"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid Value"

    def test_search(self, seeded_client):
        """Verify q filters the window case-insensitively."""
        client, _ = seeded_client
        window = {"start": "2025-10-01", "end": "2025-10-31"}

        data = client.get("/api/occurrences", params={**window, "q": "DENT"}).json()

        assert data["count"] == 1
        assert data["occurrences"][0]["id"] == "single-1"
        assert client.get(
            "/api/occurrences", params={**window, "q": "review"}
        ).json()["count"] == 5


class TestGetOccurrence:
    """Test GET /api/occurrences/{occurrence_id}."""

    def test_resolve(self, seeded_client):
        """Verify a derived id maps to its series."""
        client, _ = seeded_client

        data = client.get("/api/occurrences/weekly-1::2025-10-15::0").json()

        assert data["date"] == "2025-10-15"
        assert data["base_event"]["id"] == "weekly-1"
        assert data["is_recurring"] is True

    def test_not_an_occurrence(self, seeded_client):
        """Verify an off-series date returns 404."""
        client, _ = seeded_client

        response = client.get("/api/occurrences/weekly-1::2025-10-16::0")

        assert response.status_code == 404
        assert response.json()["kind"] == "occurrence"


class TestDeleteOccurrence:
    """Test POST /api/occurrences/{occurrence_id}/delete."""

    def test_single_then_full_delete(self, seeded_client):
        """Verify scope this hides one date and scope all removes the series."""
        client, service = seeded_client
        window = {"start": "2025-10-01", "end": "2025-10-31"}

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/delete", json={"scope": "this"}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Occurrence hidden"

        dates = [o["date"] for o in client.get("/api/occurrences", params=window).json()["occurrences"]]
        assert "2025-10-15" not in dates
        assert "2025-10-22" in dates

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-22::0/delete", json={"scope": "all"}
        )
        assert response.status_code == 200

        data = client.get("/api/occurrences", params=window).json()
        assert [o["id"] for o in data["occurrences"]] == ["single-1"]
        assert service.get_event("single-1").title == "Dentist"

    def test_default_scope(self, seeded_client):
        """Verify the scope defaults to this."""
        client, service = seeded_client

        response = client.post("/api/occurrences/weekly-1::2025-10-08::0/delete", json={})

        assert response.json()["scope"] == "this"
        assert service.exceptions.deleted_for("weekly-1") == frozenset({"2025-10-08"})

    def test_invalid_scope(self, seeded_client):
        """Verify an unknown scope fails validation."""
        client, _ = seeded_client

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-08::0/delete", json={"scope": "future"}
        )

        assert response.status_code == 422

    def test_unknown_occurrence(self, seeded_client):
        """Verify an unknown series returns 404."""
        client, _ = seeded_client

        response = client.post("/api/occurrences/nope::2025-10-08::0/delete", json={})

        assert response.status_code == 404


class TestEditOccurrence:
    """Test POST /api/occurrences/{occurrence_id}/edit."""

    def test_single_edit(self, seeded_client):
        """Verify scope this returns the detached event."""
        client, _ = seeded_client

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/edit",
            json={"scope": "this", "changes": {"title": "Offsite", "location": "Park"}},
        )

        assert response.status_code == 200
        event = response.json()["event"]
        assert event["title"] == "Offsite"
        assert event["date"] == "2025-10-15"
        assert event["parent_event_id"] == "weekly-1"
        assert event["repeat"]["type"] == "none"

        day = client.get(
            "/api/occurrences", params={"start": "2025-10-15", "end": "2025-10-15"}
        ).json()
        assert [o["title"] for o in day["occurrences"]] == ["Offsite"]

    def test_full_edit(self, seeded_client):
        """Verify scope all updates the series and keeps its anchor."""
        client, _ = seeded_client

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/edit",
            json={"scope": "all", "changes": {"title": "Renamed", "date": "2025-10-20"}},
        )

        event = response.json()["event"]
        assert event["id"] == "weekly-1"
        assert event["date"] == "2025-10-01"
        assert event["title"] == "Renamed"

    def test_invalid_changes(self, seeded_client):
        """Verify malformed changes fail validation."""
        client, _ = seeded_client

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/edit",
            json={"changes": {"start_time": "25:00"}},
        )

        assert response.status_code == 422

    def test_end_before_start(self, seeded_client):
        """Verify an edit leaving the occurrence ending before it starts returns 422."""
        client, service = seeded_client

        response = client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/edit",
            json={"scope": "this", "changes": {"start_time": "11:00"}},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "Validation Error"
        assert len(service.list_events()) == 2

    def test_edit_twice(self, seeded_client):
        """Verify a detached occurrence id no longer resolves."""
        client, _ = seeded_client
        url = "/api/occurrences/weekly-1::2025-10-15::0/edit"

        first = client.post(url, json={"scope": "this", "changes": {"title": "A"}})
        second = client.post(url, json={"scope": "this", "changes": {"title": "B"}})

        assert first.status_code == 200
        assert second.status_code == 404
        assert second.json()["kind"] == "occurrence"
        day = client.get(
            "/api/occurrences", params={"start": "2025-10-15", "end": "2025-10-15"}
        ).json()
        assert [o["title"] for o in day["occurrences"]] == ["A"]

    def test_edit_after_delete(self, seeded_client):
        """Verify a deleted occurrence cannot be edited back into view."""
        client, _ = seeded_client

        client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/delete", json={"scope": "this"}
        )
        response = client.post(
            "/api/occurrences/weekly-1::2025-10-15::0/edit",
            json={"scope": "this", "changes": {"title": "Ghost"}},
        )

        assert response.status_code == 404
        day = client.get(
            "/api/occurrences", params={"start": "2025-10-15", "end": "2025-10-15"}
        ).json()
        assert day["count"] == 0
