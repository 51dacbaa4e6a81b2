"""
core.domain.notifications — Best-effort notification fan-out.

Turns the ``DomainEvent`` values returned by the complaint workflow into
persisted ``Notification`` records and hands each one to the external
push hook.

Design decisions
----------------
* **Synchronous** — dispatch runs in the request thread right after the
  complaint change has been saved.
* **Never fails the caller** — persistence errors and push errors are
  logged and swallowed here.  The complaint change and its notifications
  are therefore not atomic: a notification can be lost, never duplicated.
* **Templates per audience** — the same event reads differently for the
  citizen who filed the complaint and for the officer handling it.

Usage::

    from core.domain.notifications import NotificationDispatcher

    dispatcher = NotificationDispatcher(store=DjangoNotificationStore())
    dispatcher.send_all(result.events)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from core.domain.events import Audience, DomainEvent, EventKind
from core.domain.exceptions import NotificationDeliveryError

if TYPE_CHECKING:
    from core.push import PushGateway
    from core.stores import NotificationRecord, NotificationStore

logger = logging.getLogger(__name__)

# ── (event kind, audience) → (title, message template) ──────────────
# Templates interpolate keys of ``DomainEvent.context``; missing keys
# render as an empty string.
_EVENT_TEMPLATES: dict[tuple[str, str], tuple[str, str]] = {
    (EventKind.COMPLAINT_SUBMITTED, Audience.CITIZEN): (
        "Complaint Submitted",
        'Your complaint "{title}" has been submitted successfully. Complaint ID: {human_id}',
    ),
    (EventKind.COMPLAINT_ASSIGNED, Audience.OFFICER): (
        "New Complaint Assigned",
        "You have been assigned a new {category} complaint: {title}",
    ),
    (EventKind.OFFICER_ASSIGNED, Audience.CITIZEN): (
        "Officer Assigned",
        'An officer has been assigned to your complaint "{title}".',
    ),
    (EventKind.STATUS_UPDATED, Audience.CITIZEN): (
        "Complaint Status Updated",
        'Your complaint "{title}" status has been changed from {old_status} to {new_status}.',
    ),
    (EventKind.STATUS_UPDATED, Audience.OFFICER): (
        "Complaint Status Updated",
        'Complaint "{title}" status has been changed to {new_status}.',
    ),
    (EventKind.COMPLAINT_RESOLVED, Audience.CITIZEN): (
        "Complaint Resolved",
        'Great news! Your complaint "{title}" has been resolved.',
    ),
    (EventKind.COMMENT_ADDED, Audience.OFFICER): (
        "New Comment on Complaint",
        'A comment has been added to complaint "{title}"',
    ),
    (EventKind.COMMENT_ADDED, Audience.CITIZEN): (
        "New Comment on Your Complaint",
        'A new comment has been added to your complaint "{title}"',
    ),
}


class _SafeContext(dict):
    def __missing__(self, key: str) -> str:
        return ""


def render_event(event: DomainEvent) -> tuple[str, str]:
    """
    Return ``(title, message)`` for ``event``.

    Unknown ``(kind, audience)`` pairs fall back to the citizen wording,
    then to a title derived from the event kind.
    """
    template = _EVENT_TEMPLATES.get((event.kind, event.audience))
    if template is None:
        template = _EVENT_TEMPLATES.get(
            (event.kind, Audience.CITIZEN),
            (str(event.kind), f"Event: {event.kind}"),
        )
    title, message = template
    return title, message.format_map(_SafeContext(event.context))


class NotificationDispatcher:
    """
    Persists one notification per event and attempts push delivery.

    ``send`` returns the stored record, or ``None`` when it could not be
    stored.  It never raises.
    """

    def __init__(self, store: NotificationStore, push_gateway: PushGateway | None = None) -> None:
        self.store = store
        self.push_gateway = push_gateway

    def send(self, event: DomainEvent) -> NotificationRecord | None:
        if event.recipient_id is None:
            logger.warning(
                "Dropping %s event for complaint %s: no recipient",
                event.kind,
                event.complaint_id,
            )
            return None

        title, message = render_event(event)
        try:
            record = self.store.add(
                recipient_id=event.recipient_id,
                type=event.notification_type,
                title=title,
                message=message,
                related_complaint_id=event.complaint_id,
            )
        except Exception:
            logger.exception(
                "Could not store %s notification for user %s (complaint %s)",
                event.kind,
                event.recipient_id,
                event.complaint_id,
            )
            return None

        self._push(record)
        logger.info(
            "Notification %s [%s] sent to user %s: %s",
            record.id,
            record.type,
            record.recipient_id,
            record.title,
        )
        return record

    def send_all(self, events: Iterable[DomainEvent]) -> list[NotificationRecord]:
        """Send every event; the result only holds the notifications that were stored."""
        sent: list[NotificationRecord] = []
        for event in events:
            record = self.send(event)
            if record is not None:
                sent.append(record)
        return sent

    def _push(self, record: NotificationRecord) -> None:
        if self.push_gateway is None:
            return
        try:
            self.push_gateway.push(record)
        except Exception as exc:
            error = NotificationDeliveryError(
                f"Push delivery failed for notification {record.id}: {exc}",
                notification_id=record.id,
            )
            logger.error("%s", error, exc_info=exc)
