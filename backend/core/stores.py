"""
core.stores — Notification persistence and read-state queries.

``NotificationStore`` is the interface the dispatcher and the notification
service depend on; ``DjangoNotificationStore`` is the ORM implementation
wired in by default.  Every read-state operation is ownership-scoped: a
notification is only visible to its recipient.
"""

from __future__ import annotations

import abc
import datetime
from dataclasses import dataclass
from typing import Any

from django.apps import apps
from django.contrib.contenttypes.models import ContentType
from django.utils import timezone

from core.domain.exceptions import NotFoundError
from core.domain.pagination import Page, normalise_window
from core.domain.transactions import guarded

DEFAULT_NOTIFICATION_PAGE_SIZE = 50


@dataclass
class NotificationRecord:
    """Framework-free view of a stored notification."""

    id: Any
    recipient_id: Any
    type: str
    title: str
    message: str
    related_complaint_id: Any = None
    read: bool = False
    read_at: datetime.datetime | None = None
    created_at: datetime.datetime | None = None


class NotificationStore(abc.ABC):
    """Persistence contract for notifications."""

    @abc.abstractmethod
    def add(
        self,
        *,
        recipient_id: Any,
        type: str,
        title: str,
        message: str,
        related_complaint_id: Any = None,
    ) -> NotificationRecord:
        """Persist a new unread notification."""

    @abc.abstractmethod
    def list_for_user(
        self,
        user_id: Any,
        *,
        unread_only: bool = False,
        page: int = 1,
        limit: int = DEFAULT_NOTIFICATION_PAGE_SIZE,
    ) -> Page[NotificationRecord]:
        """Newest first, paginated."""

    @abc.abstractmethod
    def mark_read(self, notification_id: Any, user_id: Any) -> NotificationRecord:
        """Raises ``NotFoundError`` unless the notification belongs to ``user_id``."""

    @abc.abstractmethod
    def mark_all_read(self, user_id: Any) -> int:
        """Mark every unread notification of ``user_id``; returns how many changed."""

    @abc.abstractmethod
    def unread_count(self, user_id: Any) -> int:
        ...

    @abc.abstractmethod
    def delete(self, notification_id: Any, user_id: Any) -> None:
        """Raises ``NotFoundError`` unless the notification belongs to ``user_id``."""


class DjangoNotificationStore(NotificationStore):
    """``NotificationStore`` backed by ``core.models.Notification``."""

    def __init__(self, default_limit: int = DEFAULT_NOTIFICATION_PAGE_SIZE) -> None:
        self.default_limit = default_limit

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _model():
        return apps.get_model("core", "Notification")

    @staticmethod
    def _complaint_content_type() -> ContentType:
        Complaint = apps.get_model("complaints", "Complaint")
        return ContentType.objects.get_for_model(Complaint)

    def _to_record(self, row) -> NotificationRecord:
        related = None
        if row.object_id is not None and row.content_type_id == self._complaint_content_type().pk:
            related = row.object_id
        return NotificationRecord(
            id=row.pk,
            recipient_id=row.recipient_id,
            type=row.type,
            title=row.title,
            message=row.message,
            related_complaint_id=related,
            read=row.is_read,
            read_at=row.read_at,
            created_at=row.created_at,
        )

    def _owned(self, notification_id: Any, user_id: Any):
        Notification = self._model()
        try:
            return Notification.objects.get(pk=notification_id, recipient_id=user_id)
        except (Notification.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Notification {notification_id} not found.")

    # ── Interface ────────────────────────────────────────────────────

    @guarded("saving a notification")
    def add(
        self,
        *,
        recipient_id: Any,
        type: str,
        title: str,
        message: str,
        related_complaint_id: Any = None,
    ) -> NotificationRecord:
        Notification = self._model()
        content_type = None
        if related_complaint_id is not None:
            content_type = self._complaint_content_type()
        row = Notification.objects.create(
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            content_type=content_type,
            object_id=related_complaint_id,
        )
        return self._to_record(row)

    @guarded("listing notifications")
    def list_for_user(
        self,
        user_id: Any,
        *,
        unread_only: bool = False,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[NotificationRecord]:
        page, limit, offset = normalise_window(page, limit, self.default_limit)
        qs = self._model().objects.filter(recipient_id=user_id)
        if unread_only:
            qs = qs.filter(is_read=False)
        qs = qs.order_by("-created_at", "-id")
        total = qs.count()
        rows = qs[offset:offset + limit]
        return Page(
            items=[self._to_record(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    @guarded("marking a notification as read")
    def mark_read(self, notification_id: Any, user_id: Any) -> NotificationRecord:
        row = self._owned(notification_id, user_id)
        if not row.is_read:
            row.is_read = True
            row.read_at = timezone.now()
            row.save(update_fields=["is_read", "read_at", "updated_at"])
        return self._to_record(row)

    @guarded("marking all notifications as read")
    def mark_all_read(self, user_id: Any) -> int:
        now = timezone.now()
        return (
            self._model().objects
            .filter(recipient_id=user_id, is_read=False)
            .update(is_read=True, read_at=now, updated_at=now)
        )

    @guarded("counting unread notifications")
    def unread_count(self, user_id: Any) -> int:
        return self._model().objects.filter(recipient_id=user_id, is_read=False).count()

    @guarded("deleting a notification")
    def delete(self, notification_id: Any, user_id: Any) -> None:
        self._owned(notification_id, user_id).delete()
