"""
Core app serializers.

Notification payloads, device registration, and the response-only
schemas of the dashboard and constants endpoints.  These serializers
work with the plain records and dicts produced by the service layer,
never with model instances from other apps.
"""

from __future__ import annotations

from rest_framework import serializers

from core.stores import DEFAULT_NOTIFICATION_PAGE_SIZE


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationSerializer(serializers.Serializer):
    """
    Read-only view of a ``NotificationRecord``.

    Example::

        {
            "id": 17,
            "type": "status_update",
            "title": "Complaint Status Updated",
            "message": "Your complaint \\"Pothole\\" status has been changed ...",
            "related_complaint": 4,
            "read": false,
            "read_at": null,
            "created_at": "2026-03-01T10:00:00Z"
        }
    """

    id = serializers.IntegerField(read_only=True, help_text="Notification PK.")
    type = serializers.CharField(read_only=True, help_text="Notification category.")
    title = serializers.CharField(read_only=True, help_text="Short notification title.")
    message = serializers.CharField(read_only=True, help_text="Full notification message body.")
    related_complaint = serializers.IntegerField(
        source="related_complaint_id",
        read_only=True,
        allow_null=True,
        help_text="PK of the complaint this notification is about (may point to a deleted complaint).",
    )
    read = serializers.BooleanField(read_only=True)
    read_at = serializers.DateTimeField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)


class NotificationListQuerySerializer(serializers.Serializer):
    """Query parameters of ``GET /api/core/notifications/``."""

    unread_only = serializers.BooleanField(required=False, default=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=200,
        default=DEFAULT_NOTIFICATION_PAGE_SIZE,
    )


class NotificationListSerializer(serializers.Serializer):
    """Paginated notification list plus the caller's unread counter."""

    results = NotificationSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    pages = serializers.IntegerField()
    limit = serializers.IntegerField()
    unread_count = serializers.IntegerField()


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkAllReadSerializer(serializers.Serializer):
    updated = serializers.IntegerField(help_text="How many notifications were marked as read.")
    unread_count = serializers.IntegerField()


class DeviceRegistrationSerializer(serializers.Serializer):
    """Request body of ``POST /api/core/notifications/register-device/``."""

    token = serializers.CharField(max_length=512, trim_whitespace=True)
    platform = serializers.ChoiceField(
        choices=["android", "ios", "web", "unknown"],
        required=False,
        default="unknown",
    )


class DeviceRegistrationResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    platform = serializers.CharField()
    created = serializers.BooleanField()


# ════════════════════════════════════════════════════════════════════
#  Dashboard Statistics
# ════════════════════════════════════════════════════════════════════

class CategoryCountSerializer(serializers.Serializer):
    category = serializers.CharField()
    count = serializers.IntegerField()


class DepartmentCountSerializer(serializers.Serializer):
    department = serializers.CharField()
    count = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    """Response of ``GET /api/core/dashboard/``."""

    total = serializers.IntegerField(help_text="All complaints.")
    pending = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    resolved = serializers.IntegerField()
    rejected = serializers.IntegerField()
    unassigned = serializers.IntegerField(help_text="Complaints with no officer.")
    by_category = CategoryCountSerializer(many=True)
    by_department = DepartmentCountSerializer(many=True)


# ════════════════════════════════════════════════════════════════════
#  System Constants / Enums
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "In Progress", "label": "In Progress"}
    """

    value = serializers.CharField(help_text="Machine-readable value to send in API requests.")
    label = serializers.CharField(help_text="Human-readable display label for the UI.")


class CategoryDepartmentSerializer(serializers.Serializer):
    category = serializers.CharField()
    department = serializers.CharField()


class SystemConstantsSerializer(serializers.Serializer):
    """Response of ``GET /api/core/constants/``."""

    complaint_categories = ChoiceItemSerializer(many=True)
    departments = ChoiceItemSerializer(many=True)
    complaint_statuses = ChoiceItemSerializer(many=True)
    complaint_priorities = ChoiceItemSerializer(many=True)
    user_roles = ChoiceItemSerializer(many=True)
    notification_types = ChoiceItemSerializer(many=True)
    category_departments = CategoryDepartmentSerializer(
        many=True,
        help_text="Fixed routing table from complaint category to department.",
    )
