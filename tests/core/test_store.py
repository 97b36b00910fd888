"""Unit tests for the in-memory event store."""

from datetime import date

import pytest

from calendar_core.exceptions import EventNotFoundError
from calendar_core.series import StorageCall
from calendar_core.store import InMemoryEventStore
from tests.fixtures.events import create_base_event, create_rule


def _group(group_id="group-7"):
    return [
        create_base_event(
            id="g-1",
            date=date(2025, 10, 1),
            repeat=create_rule("weekly", id=group_id),
        ),
        create_base_event(
            id="g-2",
            date=date(2025, 11, 1),
            repeat=create_rule("monthly", id=group_id),
        ),
    ]


class TestInMemoryEventStore:
    """Test basic CRUD operations."""

    def test_list_and_get(self, store):
        """Verify preloaded events can be listed and fetched."""
        assert {e.id for e in store.list_events()} == {"weekly-1", "single-1"}
        assert store.get_event("single-1").title == "Dentist"
        assert store.get_event("missing") is None

    def test_returns_copies(self, store):
        """Verify callers cannot mutate stored events."""
        event = store.get_event("single-1")
        event.title = "Changed"

        assert store.get_event("single-1").title == "Dentist"

    def test_create_returns_copy(self, store):
        """Verify neither the argument nor the result aliases the stored event."""
        event = create_base_event(id="e-1", title="Lunch")

        created = store.create_event(event)
        created.title = "Changed"
        event.title = "Also changed"

        assert created is not event
        assert store.get_event("e-1").title == "Lunch"

    def test_create_duplicate_rejected(self, store, single_event):
        """Verify creating an existing id raises ValueError."""
        with pytest.raises(ValueError):
            store.create_event(single_event)

    def test_update_keeps_id(self, store, single_event):
        """Verify an update replaces data but keeps the target id."""
        replacement = single_event.model_copy(update={"id": "other", "title": "Doctor"})

        updated = store.update_event("single-1", replacement)

        assert updated.id == "single-1"
        assert store.get_event("single-1").title == "Doctor"
        assert store.get_event("other") is None

    def test_update_missing(self, store, single_event):
        """Verify updating an unknown id raises EventNotFoundError."""
        with pytest.raises(EventNotFoundError) as exc_info:
            store.update_event("missing", single_event)
        assert exc_info.value.event_id == "missing"

    def test_delete(self, store):
        """Verify a deleted event is gone."""
        removed = store.delete_event("single-1")

        assert removed.id == "single-1"
        assert store.get_event("single-1") is None

    def test_delete_missing(self, store):
        """Verify deleting an unknown id raises EventNotFoundError."""
        with pytest.raises(EventNotFoundError):
            store.delete_event("missing")

    def test_clear(self, store):
        """Verify clear removes every event."""
        store.clear()

        assert store.list_events() == []


class TestRepeatGroups:
    """Test operations on repeat groups."""

    def test_update_group_keeps_date_and_rule(self):
        """Verify each member keeps its own date and repeat rule."""
        store = InMemoryEventStore(_group())
        payload = create_base_event(
            title="Shared", date=date(2030, 1, 1), location="Hall", repeat=create_rule("daily")
        )

        updated = store.update_group("group-7", payload)

        assert {e.id for e in updated} == {"g-1", "g-2"}
        first, second = store.get_event("g-1"), store.get_event("g-2")
        assert first.title == second.title == "Shared"
        assert first.location == "Hall"
        assert first.date == date(2025, 10, 1)
        assert second.date == date(2025, 11, 1)
        assert first.repeat.kind == "weekly"
        assert second.repeat.kind == "monthly"

    def test_delete_group(self, single_event):
        """Verify a group delete removes only its members."""
        store = InMemoryEventStore([*_group(), single_event])

        removed = store.delete_group("group-7")

        assert {e.id for e in removed} == {"g-1", "g-2"}
        assert [e.id for e in store.list_events()] == ["single-1"]

    def test_unknown_group(self, store, single_event):
        """Verify group operations on an unknown group raise."""
        with pytest.raises(EventNotFoundError) as exc_info:
            store.delete_group("nope")
        assert exc_info.value.kind == "group"

        with pytest.raises(EventNotFoundError):
            store.update_group("nope", single_event)


class TestApply:
    """Test StorageCall dispatch."""

    def test_apply_create(self, store):
        """Verify create calls store their payload."""
        event = create_base_event(id="new-1")

        store.apply(StorageCall(operation="create_event", target="new-1", payload=event))

        assert store.get_event("new-1") is not None

    def test_apply_delete(self, store):
        """Verify delete calls remove their target."""
        store.apply(StorageCall(operation="delete_event", target="single-1"))

        assert store.get_event("single-1") is None

    def test_apply_update_group(self):
        """Verify group update calls reach every member."""
        store = InMemoryEventStore(_group())
        payload = create_base_event(title="Shared")

        store.apply(StorageCall(operation="update_group", target="group-7", payload=payload))

        assert all(e.title == "Shared" for e in store.list_events())

    def test_apply_requires_target(self, store):
        """Verify calls without a target are rejected."""
        with pytest.raises(ValueError):
            store.apply(StorageCall(operation="delete_event"))

    def test_apply_requires_payload(self, store):
        """Verify create and update calls without a payload are rejected."""
        with pytest.raises(ValueError):
            store.apply(StorageCall(operation="create_event"))
        with pytest.raises(ValueError):
            store.apply(StorageCall(operation="update_event", target="single-1"))
