"""
Unit tests for ``complaints.workflow.ComplaintWorkflow``.

The workflow runs against the in-memory fakes from ``tests.fakes``; no
database is touched.  User ids are plain strings ("u1", "o1") because the
workflow never interprets them.
"""

from __future__ import annotations

import datetime
import re

import pytest

from complaints.domain import ComplaintStatus, Department
from complaints.routing import LeastLoadedOfficerPolicy
from complaints.services import ComplaintService
from complaints.workflow import ComplaintWorkflow
from core.domain.events import Audience, EventKind, NotificationType
from core.domain.exceptions import (
    ConcurrentUpdateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from core.domain.notifications import NotificationDispatcher
from tests.fakes import (
    BrokenComplaintStore,
    BrokenNotificationStore,
    ExplodingPushGateway,
    InMemoryComplaintStore,
    InMemoryNotificationStore,
    InMemoryUserDirectory,
    admin,
    citizen,
    officer,
)

NOW = datetime.datetime(2026, 3, 14, 9, 30, tzinfo=datetime.timezone.utc)


class FixedRandom:
    """Returns the queued suffixes in order, repeating the last one."""

    def __init__(self, *values):
        self.values = list(values)

    def randint(self, low, high):
        return self.values.pop(0) if len(self.values) > 1 else self.values[0]


@pytest.fixture()
def store():
    return InMemoryComplaintStore()


@pytest.fixture()
def directory():
    return InMemoryUserDirectory(
        citizen("u1"),
        citizen("u2"),
        officer("o1", joined_days_ago=30),
        officer("o2", joined_days_ago=5),
        admin("a1"),
    )


@pytest.fixture()
def workflow(store, directory):
    return ComplaintWorkflow(store, directory, clock=lambda: NOW)


def _create(workflow, submitter="u1", **data):
    payload = {"title": "Burst pipe", "description": "Water everywhere", "category": "Water"}
    payload.update(data)
    return workflow.create(payload, submitter).complaint


def _targets(events):
    return [(e.kind, e.recipient_id) for e in events]


# ═══════════════════════════════════════════════════════════════════
#  create
# ═══════════════════════════════════════════════════════════════════


class TestCreate:
    def test_water_complaint_is_routed_and_announced(self, workflow):
        result = workflow.create({"title": "Burst pipe", "description": "Leak", "category": "Water"}, "u1")
        complaint = result.complaint

        assert complaint.department == Department.WATER_SUPPLY
        assert complaint.assigned_to == "o1"
        assert complaint.status == ComplaintStatus.PENDING
        assert len(complaint.status_history) == 1
        entry = complaint.status_history[0]
        assert (entry.status, entry.changed_by, entry.notes) == ("Pending", "u1", "Complaint submitted")
        assert _targets(result.events) == [
            (EventKind.COMPLAINT_SUBMITTED, "u1"),
            (EventKind.COMPLAINT_ASSIGNED, "o1"),
        ]
        assert result.events[1].audience == Audience.OFFICER

    def test_human_id_encodes_creation_date(self, workflow):
        complaint = _create(workflow)

        match = re.fullmatch(r"COMP-(\d{8})-(\d{5})", complaint.human_id)
        assert match is not None
        assert match.group(1) == "20260314"
        assert 10000 <= int(match.group(2)) <= 99999
        assert complaint.created_at == NOW

    @pytest.mark.parametrize(
        ("category", "department"),
        [
            ("Road", "Public Works"),
            ("Water", "Water Supply"),
            ("Electricity", "Electricity Board"),
            ("Sanitation", "Sanitation Department"),
            ("Other", "General"),
        ],
    )
    def test_department_follows_category(self, workflow, category, department):
        assert _create(workflow, category=category).department == department

    def test_omitted_category_is_other(self, workflow):
        complaint = _create(workflow, category=None)
        assert complaint.category == "Other"
        assert complaint.department == "General"

    def test_unknown_category_is_rejected(self, workflow, store):
        with pytest.raises(ValidationError) as exc_info:
            _create(workflow, category="Parks")
        assert exc_info.value.field == "category"
        assert store.rows == {}

    @pytest.mark.parametrize("missing", ["title", "description"])
    def test_required_text_fields(self, workflow, missing):
        with pytest.raises(ValidationError):
            _create(workflow, **{missing: "   "})

    def test_empty_roster_leaves_complaint_unassigned(self, store):
        workflow = ComplaintWorkflow(store, InMemoryUserDirectory(citizen("u1")), clock=lambda: NOW)
        result = workflow.create({"title": "Pothole", "description": "Deep", "category": "Road"}, "u1")

        assert result.complaint.assigned_to is None
        assert _targets(result.events) == [(EventKind.COMPLAINT_SUBMITTED, "u1")]

    def test_inactive_officers_are_skipped(self, store):
        directory = InMemoryUserDirectory(
            citizen("u1"),
            officer("o1", joined_days_ago=100, is_active=False),
            officer("o2", joined_days_ago=1),
        )
        workflow = ComplaintWorkflow(store, directory, clock=lambda: NOW)
        assert _create(workflow).assigned_to == "o2"

    def test_routing_policy_is_pluggable(self, store):
        directory = InMemoryUserDirectory(
            citizen("u1"),
            officer("o1", joined_days_ago=30, open_complaints=4),
            officer("o2", joined_days_ago=5, open_complaints=1),
        )
        workflow = ComplaintWorkflow(store, directory, LeastLoadedOfficerPolicy(), clock=lambda: NOW)
        assert _create(workflow).assigned_to == "o2"

    def test_human_id_collision_draws_again(self, store, directory):
        workflow = ComplaintWorkflow(
            store, directory, clock=lambda: NOW, rng=FixedRandom(11111, 11111, 22222),
        )
        first = _create(workflow)
        second = _create(workflow)

        assert first.human_id == "COMP-20260314-11111"
        assert second.human_id == "COMP-20260314-22222"

    def test_human_id_exhaustion_raises_storage_error(self, store, directory):
        workflow = ComplaintWorkflow(
            store, directory, clock=lambda: NOW, rng=FixedRandom(33333), human_id_attempts=3,
        )
        _create(workflow)
        with pytest.raises(StorageError):
            _create(workflow)
        assert len(store.rows) == 1

    def test_storage_failure_propagates(self, directory):
        workflow = ComplaintWorkflow(BrokenComplaintStore(), directory, clock=lambda: NOW)
        with pytest.raises(StorageError):
            _create(workflow)


# ═══════════════════════════════════════════════════════════════════
#  update_status
# ═══════════════════════════════════════════════════════════════════


class TestUpdateStatus:
    def test_resolution_by_assigned_officer(self, workflow):
        complaint = _create(workflow)

        result = workflow.update_status(complaint.id, "Resolved", "o1", "fixed")

        assert result.complaint.status == "Resolved"
        assert result.complaint.resolved_at == NOW
        assert result.complaint.resolution_notes == "fixed"
        assert _targets(result.events) == [
            (EventKind.STATUS_UPDATED, "u1"),
            (EventKind.COMPLAINT_RESOLVED, "u1"),
        ]

    def test_appends_exactly_one_history_entry(self, workflow):
        complaint = _create(workflow)

        updated = workflow.update_status(complaint.id, "In Progress", "o1").complaint

        assert len(updated.status_history) == 2
        entry = updated.status_history[-1]
        assert entry.status == "In Progress"
        assert entry.changed_by == "o1"
        assert entry.notes == "Status changed from Pending to In Progress"

    def test_compact_in_progress_spelling(self, workflow):
        complaint = _create(workflow)
        updated = workflow.update_status(complaint.id, "InProgress", "o1").complaint
        assert updated.status == ComplaintStatus.IN_PROGRESS

    def test_assigned_officer_hears_about_someone_elses_change(self, workflow):
        complaint = _create(workflow)

        result = workflow.update_status(complaint.id, "Rejected", "a1", "duplicate")

        assert _targets(result.events) == [
            (EventKind.STATUS_UPDATED, "u1"),
            (EventKind.STATUS_UPDATED, "o1"),
        ]
        assert result.events[1].audience == Audience.OFFICER
        assert result.complaint.resolved_at is None
        assert result.complaint.resolution_notes is None

    def test_leaving_resolved_keeps_resolved_at(self, workflow):
        complaint = _create(workflow)
        resolved = workflow.update_status(complaint.id, "Resolved", "o1").complaint

        reopened = workflow.update_status(complaint.id, "In Progress", "a1").complaint

        assert reopened.status == "In Progress"
        assert reopened.resolved_at == resolved.resolved_at
        assert len(reopened.status_history) == 3

    def test_unknown_status_is_rejected(self, workflow, store):
        complaint = _create(workflow)
        with pytest.raises(ValidationError):
            workflow.update_status(complaint.id, "Closed", "o1")
        assert len(store.find_by_id(complaint.id).status_history) == 1

    def test_missing_complaint(self, workflow):
        with pytest.raises(NotFoundError):
            workflow.update_status(999, "Resolved", "o1")


# ═══════════════════════════════════════════════════════════════════
#  assign_officer
# ═══════════════════════════════════════════════════════════════════


class TestAssignOfficer:
    def test_reassignment(self, workflow):
        complaint = _create(workflow)

        result = workflow.assign_officer(complaint.id, "o2", "a1")

        updated = result.complaint
        assert updated.assigned_to == "o2"
        assert updated.status == "Pending"
        assert len(updated.status_history) == 2
        entry = updated.status_history[-1]
        assert entry.status == "Pending"
        assert entry.changed_by == "o2"
        assert entry.notes == "Complaint assigned to officer: Officer o2"
        assert _targets(result.events) == [
            (EventKind.COMPLAINT_ASSIGNED, "o2"),
            (EventKind.OFFICER_ASSIGNED, "u1"),
        ]

    @pytest.mark.parametrize("target", ["u2", "a1", "ghost"])
    def test_target_must_be_an_officer(self, workflow, target):
        complaint = _create(workflow)
        with pytest.raises(ValidationError):
            workflow.assign_officer(complaint.id, target, "a1")

    def test_missing_complaint(self, workflow):
        with pytest.raises(NotFoundError):
            workflow.assign_officer(999, "o1", "a1")


# ═══════════════════════════════════════════════════════════════════
#  add_comment
# ═══════════════════════════════════════════════════════════════════


class TestAddComment:
    def test_submitter_comment_notifies_assigned_officer(self, workflow):
        complaint = _create(workflow)

        result = workflow.add_comment(complaint.id, "u1", "Any update?")

        assert _targets(result.events) == [(EventKind.COMMENT_ADDED, "o1")]
        assert result.events[0].audience == Audience.OFFICER
        comment = result.complaint.comments[-1]
        assert (comment.author_id, comment.text, comment.created_at) == ("u1", "Any update?", NOW)

    def test_officer_comment_notifies_submitter(self, workflow):
        complaint = _create(workflow)
        result = workflow.add_comment(complaint.id, "o1", "Crew dispatched.")
        assert _targets(result.events) == [(EventKind.COMMENT_ADDED, "u1")]

    def test_admin_comment_on_unassigned_complaint_notifies_submitter(self, store):
        workflow = ComplaintWorkflow(store, InMemoryUserDirectory(citizen("u1"), admin("a1")), clock=lambda: NOW)
        complaint = _create(workflow)

        result = workflow.add_comment(complaint.id, "a1", "Looking into it.")

        assert _targets(result.events) == [(EventKind.COMMENT_ADDED, "u1")]

    def test_submitter_comment_without_officer_is_silent(self, store):
        workflow = ComplaintWorkflow(store, InMemoryUserDirectory(citizen("u1")), clock=lambda: NOW)
        complaint = _create(workflow)

        result = workflow.add_comment(complaint.id, "u1", "Hello?")

        assert result.events == []
        assert len(result.complaint.comments) == 1

    @pytest.mark.parametrize("text", ["", "   ", "x" * 501])
    def test_text_is_validated(self, workflow, text):
        complaint = _create(workflow)
        with pytest.raises(ValidationError):
            workflow.add_comment(complaint.id, "u1", text)

    def test_comments_are_appended_in_order(self, workflow):
        complaint = _create(workflow)
        workflow.add_comment(complaint.id, "u1", "first")
        updated = workflow.add_comment(complaint.id, "o1", "second").complaint
        assert [c.text for c in updated.comments] == ["first", "second"]


# ═══════════════════════════════════════════════════════════════════
#  update_details / delete / concurrency
# ═══════════════════════════════════════════════════════════════════


class TestDetailsAndDeletion:
    def test_category_change_rederives_department(self, workflow):
        complaint = _create(workflow)

        result = workflow.update_details(
            complaint.id,
            {"category": "Road", "title": "Sinkhole", "status": "Resolved", "human_id": "X"},
        )

        updated = result.complaint
        assert (updated.category, updated.department, updated.title) == ("Road", "Public Works", "Sinkhole")
        assert updated.status == "Pending"
        assert updated.human_id == complaint.human_id
        assert result.events == []

    def test_delete(self, workflow, store):
        complaint = _create(workflow)

        workflow.delete(complaint.id)

        assert store.find_by_id(complaint.id) is None
        with pytest.raises(NotFoundError):
            workflow.delete(complaint.id)

    def test_stale_copy_is_rejected(self, workflow, store):
        complaint = _create(workflow)
        stale = store.find_by_id(complaint.id)
        workflow.add_comment(complaint.id, "u1", "fresh write")

        stale.title = "Overwrite"
        with pytest.raises(ConcurrentUpdateError):
            store.save(stale)


# ═══════════════════════════════════════════════════════════════════
#  ComplaintService (workflow + dispatch)
# ═══════════════════════════════════════════════════════════════════


class TestComplaintService:
    def test_events_become_notifications(self, workflow):
        notifications = InMemoryNotificationStore()
        service = ComplaintService(workflow, NotificationDispatcher(notifications))

        complaint = service.create_complaint(
            {"title": "Burst pipe", "description": "Leak", "category": "Water"}, "u1",
        )
        service.update_status(complaint.id, "Resolved", "o1", "fixed")

        to_citizen = [r.type for r in notifications.for_user("u1")]
        assert to_citizen == [
            NotificationType.COMPLAINT_SUBMITTED,
            NotificationType.STATUS_UPDATE,
            NotificationType.COMPLAINT_RESOLVED,
        ]
        assert [r.type for r in notifications.for_user("o1")] == [NotificationType.COMPLAINT_ASSIGNED]
        assert all(r.related_complaint_id == complaint.id for r in notifications.records)

    def test_notification_failures_do_not_fail_the_operation(self, workflow, store):
        service = ComplaintService(
            workflow,
            NotificationDispatcher(BrokenNotificationStore(), ExplodingPushGateway()),
        )

        complaint = service.create_complaint(
            {"title": "Dark street", "description": "Lamp out", "category": "Electricity"}, "u1",
        )

        assert store.find_by_id(complaint.id) is not None

    def test_delete_leaves_notifications(self, workflow):
        notifications = InMemoryNotificationStore()
        service = ComplaintService(workflow, NotificationDispatcher(notifications))
        complaint = service.create_complaint(
            {"title": "Garbage", "description": "Not collected", "category": "Sanitation"}, "u1",
        )

        service.delete_complaint(complaint.id)

        assert len(notifications.records) == 2
