"""
Unit tests for ``NotificationDispatcher``: template rendering, delivery
to the push gateway, and absorption of every failure.
"""

from __future__ import annotations

import logging

from core.domain.events import Audience, DomainEvent, EventKind, NotificationType
from core.domain.notifications import NotificationDispatcher, render_event
from tests.fakes import (
    BrokenNotificationStore,
    ExplodingPushGateway,
    InMemoryNotificationStore,
    RecordingPushGateway,
)


def _event(kind=EventKind.STATUS_UPDATED, recipient="u1", audience=Audience.CITIZEN, **context):
    base = {
        "title": "Broken streetlight",
        "human_id": "COMP-20260314-12345",
        "category": "Electricity",
        "old_status": "Pending",
        "new_status": "Resolved",
    }
    base.update(context)
    return DomainEvent(kind=kind, recipient_id=recipient, complaint_id=42, audience=audience, context=base)


class TestRenderEvent:
    def test_citizen_status_message(self):
        title, message = render_event(_event())
        assert title == "Complaint Status Updated"
        assert message == (
            'Your complaint "Broken streetlight" status has been changed from Pending to Resolved.'
        )

    def test_officer_assignment_message(self):
        title, message = render_event(_event(EventKind.COMPLAINT_ASSIGNED, "o1", Audience.OFFICER))
        assert title == "New Complaint Assigned"
        assert message == "You have been assigned a new Electricity complaint: Broken streetlight"

    def test_submission_mentions_tracking_id(self):
        _, message = render_event(_event(EventKind.COMPLAINT_SUBMITTED))
        assert "COMP-20260314-12345" in message

    def test_missing_context_renders_blank(self):
        event = DomainEvent(kind=EventKind.COMPLAINT_RESOLVED, recipient_id="u1", complaint_id=1)
        _, message = render_event(event)
        assert message == 'Great news! Your complaint "" has been resolved.'


class TestDispatcher:
    def test_persists_and_pushes(self):
        store, gateway = InMemoryNotificationStore(), RecordingPushGateway()
        record = NotificationDispatcher(store, gateway).send(_event())

        assert record.type == NotificationType.STATUS_UPDATE
        assert record.recipient_id == "u1"
        assert record.related_complaint_id == 42
        assert record.read is False
        assert gateway.pushed == [record]

    def test_store_failure_is_absorbed(self, caplog):
        gateway = RecordingPushGateway()
        dispatcher = NotificationDispatcher(BrokenNotificationStore(), gateway)

        with caplog.at_level(logging.ERROR, logger="core.domain.notifications"):
            assert dispatcher.send(_event()) is None

        assert gateway.pushed == []
        assert "Could not store" in caplog.text

    def test_push_failure_keeps_stored_notification(self, caplog):
        store = InMemoryNotificationStore()
        dispatcher = NotificationDispatcher(store, ExplodingPushGateway())

        with caplog.at_level(logging.ERROR, logger="core.domain.notifications"):
            record = dispatcher.send(_event())

        assert record is not None
        assert store.records == [record]
        assert "Push delivery failed" in caplog.text

    def test_event_without_recipient_is_dropped(self):
        store = InMemoryNotificationStore()
        assert NotificationDispatcher(store).send(_event(recipient=None)) is None
        assert store.records == []

    def test_send_all_returns_only_stored(self):
        store = InMemoryNotificationStore()
        sent = NotificationDispatcher(store).send_all(
            [_event(), _event(recipient=None), _event(EventKind.COMPLAINT_RESOLVED)]
        )
        assert [r.type for r in sent] == [NotificationType.STATUS_UPDATE, NotificationType.COMPLAINT_RESOLVED]

    def test_read_state_of_fake_store(self):
        store = InMemoryNotificationStore()
        dispatcher = NotificationDispatcher(store)
        dispatcher.send_all([_event(), _event(), _event(recipient="u2")])

        assert store.mark_all_read("u1") == 2
        assert store.unread_count("u1") == 0
        assert all(r.read_at is not None for r in store.for_user("u1"))
        assert store.unread_count("u2") == 1
