"""Tests for calendar events in DomainStore."""

import pytest
from datetime import date, datetime, UTC

from familyhub.domain.entities import EventCategory, Priority, Reminder
from familyhub.domain.errors import NotFoundError, ValidationError
from familyhub.domain.recurrence import Frequency, RecurrenceRule


def test_add_event_defaults(store, family):
    event_id = store.add_event(
        "Swimming", datetime(2024, 1, 1, 17), datetime(2024, 1, 1, 18), [family["sam"]]
    )
    event = store.get_event(event_id)
    assert event.category == EventCategory.OTHER
    assert event.priority == Priority.MEDIUM
    assert event.reminder == Reminder(minutes=15, enabled=False)
    assert event.recurrence.freq is Frequency.NONE
    assert event.attachments == ()
    assert not event.is_private


def test_add_event_details(store, family):
    event_id = store.add_event(
        "Dentist",
        datetime(2024, 1, 2, 9),
        datetime(2024, 1, 2, 10),
        [family["kim"]],
        created_by=family["alex"],
        category=EventCategory.HEALTH,
        location="Main St",
        attachments=["letter.pdf"],
    )
    event = store.get_event(event_id)
    assert event.created_by == family["alex"]
    assert event.location == "Main St"
    assert event.attachments == ("letter.pdf",)


def test_audit_fields_are_protected(store, family):
    with pytest.raises(ValidationError):
        store.add_event("X", datetime(2024, 1, 1), datetime(2024, 1, 1), [], created_at=datetime(2020, 1, 1))


def test_update_and_delete_event(store, strict_store, family):
    event_id = store.add_event("Swimming", datetime(2024, 1, 1, 17), datetime(2024, 1, 1, 18), [])
    created = store.get_event(event_id)
    store.update_event(event_id, title="Swim class", profile_ids=[family["sam"]])
    updated = store.get_event(event_id)
    assert updated.title == "Swim class"
    assert updated.profile_ids == (family["sam"],)
    assert updated.updated_at > created.updated_at

    store.delete_event(event_id)
    assert store.events == []
    store.delete_event(event_id)
    with pytest.raises(NotFoundError):
        strict_store.delete_event(event_id)


def test_events_on(store, family):
    sam, kim = family["sam"], family["kim"]
    weekly = store.add_event(
        "Swimming",
        datetime(2024, 1, 1, 17),
        datetime(2024, 1, 1, 18),
        [sam],
        recurrence=RecurrenceRule(freq=Frequency.WEEKLY),
    )
    birthday = store.add_event(
        "Birthday", datetime(2024, 1, 8), datetime(2024, 1, 8), [sam, kim], all_day=True
    )
    store.add_event("Dentist", datetime(2024, 1, 9, 9), datetime(2024, 1, 9, 10), [kim])

    assert [e.id for e in store.events_on(date(2024, 1, 8))] == [birthday, weekly]
    assert [e.id for e in store.events_on("2024-01-08", [kim])] == [birthday]
    assert [e.id for e in store.events_on(date(2024, 1, 2))] == [weekly]
    assert store.events_on(date(2023, 12, 31)) == []


def test_event_times_accept_iso_strings(store, family):
    """Test that ISO instants, as persisted, are parsed on add and update."""
    event_id = store.add_event(
        "Dentist", "2024-01-02T09:00:00Z", "2024-01-02T10:00:00Z", [family["kim"]]
    )
    assert store.get_event(event_id).start == datetime(2024, 1, 2, 9, tzinfo=UTC)

    store.update_event(event_id, start="2024-01-03T09:00:00.000Z", end="2024-01-03T10:00:00.000Z")
    event = store.get_event(event_id)
    assert event.start == datetime(2024, 1, 3, 9, tzinfo=UTC)
    assert event.end == datetime(2024, 1, 3, 10, tzinfo=UTC)
    assert [e.id for e in store.events_on("2024-01-03")] == [event_id]


def test_event_times_must_be_instants(store, family):
    with pytest.raises(ValidationError):
        store.add_event("Dentist", "next tuesday", "2024-01-02T10:00:00Z", [family["kim"]])

    event_id = store.add_event(
        "Dentist", datetime(2024, 1, 2, 9), datetime(2024, 1, 2, 10), [family["kim"]]
    )
    with pytest.raises(ValidationError):
        store.update_event(event_id, start=date(2024, 1, 3))
    assert store.get_event(event_id).start == datetime(2024, 1, 2, 9)
