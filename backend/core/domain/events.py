"""
core.domain.events — Domain events emitted by the complaint workflow.

Workflow operations never talk to the notification backend directly.
They return a list of ``DomainEvent`` values describing *who* should hear
about *what*; ``core.domain.notifications.NotificationDispatcher`` turns
each event into a persisted ``Notification`` after the complaint change
has been saved.

Usage::

    result = workflow.update_status(complaint_id, "Resolved", actor_id=7)
    dispatcher.send_all(result.events)
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any

from django.db import models
from django.utils import timezone


class NotificationType(models.TextChoices):
    """Notification categories shown to the recipient."""

    COMPLAINT_SUBMITTED = "complaint_submitted", "Complaint Submitted"
    COMPLAINT_ASSIGNED = "complaint_assigned", "Complaint Assigned"
    STATUS_UPDATE = "status_update", "Status Update"
    COMPLAINT_RESOLVED = "complaint_resolved", "Complaint Resolved"
    OFFICER_ASSIGNED = "officer_assigned", "Officer Assigned"
    COMMENT_ADDED = "comment_added", "Comment Added"
    GENERAL = "general", "General"


class EventKind(models.TextChoices):
    """What happened to a complaint."""

    COMPLAINT_SUBMITTED = "ComplaintSubmitted", "Complaint submitted"
    COMPLAINT_ASSIGNED = "ComplaintAssigned", "Complaint assigned to an officer"
    STATUS_UPDATED = "StatusUpdated", "Status updated"
    COMPLAINT_RESOLVED = "ComplaintResolved", "Complaint resolved"
    OFFICER_ASSIGNED = "OfficerAssigned", "Officer assigned (citizen view)"
    COMMENT_ADDED = "CommentAdded", "Comment added"


class Audience(models.TextChoices):
    """Which side of the complaint the recipient is on; selects the wording."""

    CITIZEN = "citizen", "Citizen"
    OFFICER = "officer", "Officer"


#: Event kind → notification type stored on the ``Notification`` row.
NOTIFICATION_TYPE_FOR_EVENT: dict[str, str] = {
    EventKind.COMPLAINT_SUBMITTED: NotificationType.COMPLAINT_SUBMITTED,
    EventKind.COMPLAINT_ASSIGNED:  NotificationType.COMPLAINT_ASSIGNED,
    EventKind.STATUS_UPDATED:      NotificationType.STATUS_UPDATE,
    EventKind.COMPLAINT_RESOLVED:  NotificationType.COMPLAINT_RESOLVED,
    EventKind.OFFICER_ASSIGNED:    NotificationType.OFFICER_ASSIGNED,
    EventKind.COMMENT_ADDED:       NotificationType.COMMENT_ADDED,
}


@dataclass(frozen=True)
class DomainEvent:
    """
    A single notification-worthy fact about a complaint.

    ``context`` carries the values the message templates interpolate
    (``title``, ``human_id``, ``category``, ``old_status``, ``new_status``,
    ``officer_name``).
    """

    kind: str
    recipient_id: Any
    complaint_id: Any
    audience: str = Audience.CITIZEN
    actor_id: Any = None
    context: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime.datetime = field(default_factory=timezone.now)

    @property
    def notification_type(self) -> str:
        return NOTIFICATION_TYPE_FOR_EVENT.get(self.kind, NotificationType.GENERAL)
