"""
Core app Service Layer.

Cross-app services backing the ``/api/core/`` endpoints.

Architecture
------------
- ``NotificationService``          — per-user notification read-state and
  device registration, over a ``NotificationStore``.
- ``DashboardAggregationService``  — complaint counters for the admin
  dashboard.
- ``SystemConstantsService``       — choice enumerations for frontend
  dropdowns.
- ``build_notification_dispatcher`` — wires the dispatcher from
  ``settings.NOTIFICATIONS``.
"""

from __future__ import annotations

import logging
from typing import Any

from django.apps import apps
from django.db.models import Count, QuerySet
from django.utils.module_loading import import_string

from core.constants import app_setting
from core.domain.exceptions import ValidationError
from core.domain.notifications import NotificationDispatcher
from core.domain.pagination import Page
from core.domain.transactions import guarded
from core.push import PushGateway
from core.stores import DjangoNotificationStore, NotificationRecord, NotificationStore

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Wiring
# ═══════════════════════════════════════════════════════════════════


def build_notification_store() -> NotificationStore:
    return DjangoNotificationStore(
        default_limit=app_setting("NOTIFICATIONS", "DEFAULT_PAGE_SIZE"),
    )


def build_push_gateway() -> PushGateway:
    return import_string(app_setting("NOTIFICATIONS", "PUSH_GATEWAY"))()


def build_notification_dispatcher(
    store: NotificationStore | None = None,
) -> NotificationDispatcher:
    """Dispatcher over the configured store and push gateway."""
    return NotificationDispatcher(
        store=store or build_notification_store(),
        push_gateway=build_push_gateway(),
    )


# ═══════════════════════════════════════════════════════════════════
#  Notification Service
# ═══════════════════════════════════════════════════════════════════


class NotificationService:
    """
    Notification operations on behalf of one user.

    Every call is scoped to ``user_id``: another user's notification
    behaves exactly like a missing one (``NotFoundError``).
    """

    def __init__(self, user_id: Any, store: NotificationStore | None = None) -> None:
        self.user_id = user_id
        self.store = store or build_notification_store()

    def list_notifications(
        self,
        *,
        unread_only: bool = False,
        page: int = 1,
        limit: int | None = None,
    ) -> tuple[Page[NotificationRecord], int]:
        """Return the requested page (newest first) and the current unread count."""
        result = self.store.list_for_user(
            self.user_id,
            unread_only=unread_only,
            page=page,
            limit=limit,
        )
        return result, self.store.unread_count(self.user_id)

    def mark_notification_read(self, notification_id: Any) -> NotificationRecord:
        return self.store.mark_read(notification_id, self.user_id)

    def mark_all_read(self) -> int:
        count = self.store.mark_all_read(self.user_id)
        logger.info("User %s marked %d notification(s) as read", self.user_id, count)
        return count

    def unread_count(self) -> int:
        return self.store.unread_count(self.user_id)

    def delete_notification(self, notification_id: Any) -> None:
        self.store.delete(notification_id, self.user_id)
        logger.info("User %s deleted notification %s", self.user_id, notification_id)

    @guarded("registering a push device")
    def register_device(self, token: str, platform: str = "unknown") -> tuple[Any, bool]:
        """
        Remember a push token for this user.

        Returns ``(registration, created)``; registering the same token
        again only refreshes its platform.
        """
        token = (token or "").strip()
        if not token:
            raise ValidationError("Device token is required.", field="token")

        DeviceRegistration = apps.get_model("core", "DeviceRegistration")
        registration, created = DeviceRegistration.objects.update_or_create(
            user_id=self.user_id,
            token=token,
            defaults={"platform": platform or "unknown"},
        )
        logger.info(
            "%s %s push device for user %s",
            "Registered" if created else "Refreshed",
            registration.platform,
            self.user_id,
        )
        return registration, created


# ═══════════════════════════════════════════════════════════════════
#  Dashboard Statistics Service
# ═══════════════════════════════════════════════════════════════════


class DashboardAggregationService:
    """
    Complaint counters for the admin dashboard.

    Response shape::

        {
            "total": 12,
            "pending": 4,
            "in_progress": 5,
            "resolved": 2,
            "rejected": 1,
            "unassigned": 3,
            "by_category": [{"category": "Road", "count": 6}, ...],
            "by_department": [{"department": "Public Works", "count": 6}, ...],
        }
    """

    def _get_complaint_queryset(self) -> QuerySet:
        return apps.get_model("complaints", "Complaint").objects.all()

    @guarded("aggregating dashboard statistics")
    def get_stats(self) -> dict[str, Any]:
        from complaints.domain import ComplaintStatus

        qs = self._get_complaint_queryset()
        by_status = {
            row["status"]: row["count"]
            for row in qs.order_by().values("status").annotate(count=Count("id"))
        }
        return {
            "total": sum(by_status.values()),
            "pending": by_status.get(ComplaintStatus.PENDING, 0),
            "in_progress": by_status.get(ComplaintStatus.IN_PROGRESS, 0),
            "resolved": by_status.get(ComplaintStatus.RESOLVED, 0),
            "rejected": by_status.get(ComplaintStatus.REJECTED, 0),
            "unassigned": qs.filter(assigned_to__isnull=True).count(),
            "by_category": list(
                qs.order_by().values("category").annotate(count=Count("id")).order_by("category")
            ),
            "by_department": list(
                qs.order_by().values("department").annotate(count=Count("id")).order_by("department")
            ),
        }


# ════════════════════════════════════════════════════════════════════
#  System Constants Service
# ════════════════════════════════════════════════════════════════════


class SystemConstantsService:
    """
    Gathers the choice enumerations the frontend needs to render
    dropdowns and labels.  Stateless and public.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        from accounts.models import UserRole
        from complaints.domain import (
            CATEGORY_DEPARTMENTS,
            ComplaintCategory,
            ComplaintPriority,
            ComplaintStatus,
            Department,
        )
        from core.domain.events import NotificationType

        to_list = SystemConstantsService._choices_to_list
        return {
            "complaint_categories": to_list(ComplaintCategory),
            "departments": to_list(Department),
            "complaint_statuses": to_list(ComplaintStatus),
            "complaint_priorities": to_list(ComplaintPriority),
            "user_roles": to_list(UserRole),
            "notification_types": to_list(NotificationType),
            "category_departments": [
                {"category": str(category), "department": str(department)}
                for category, department in CATEGORY_DEPARTMENTS.items()
            ],
        }

    @staticmethod
    def _choices_to_list(choices_class: type) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
