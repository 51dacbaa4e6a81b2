"""
Complaints app serializers.

Request serializers validate the *shape* of incoming data (types,
lengths, coordinate ranges) before the workflow runs; the workflow
re-checks every business rule on its own.  Response serializers render
the ``complaints.domain.Complaint`` dataclass, never ORM rows.
"""

from __future__ import annotations

from rest_framework import serializers

from .domain import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintStatus,
    Department,
)
from .workflow import COMMENT_MAX_LENGTH, TITLE_MAX_LENGTH


# ════════════════════════════════════════════════════════════════════
#  Request serializers
# ════════════════════════════════════════════════════════════════════

class ComplaintCreateSerializer(serializers.Serializer):
    """
    Body of ``POST /api/complaints/``.

    ``category`` defaults to ``Other`` and ``priority`` to ``Medium``
    when omitted.
    """

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=ComplaintCategory.choices, required=False)
    priority = serializers.ChoiceField(choices=ComplaintPriority.choices, required=False)
    address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    image_url = serializers.URLField(max_length=500, required=False, allow_blank=True)


class ComplaintUpdateSerializer(ComplaintCreateSerializer):
    """Body of ``PATCH /api/complaints/{id}/``; every field optional."""

    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=False)
    description = serializers.CharField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to update.")
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    """
    Body of ``PATCH /api/complaints/{id}/status/``.

    Accepts ``InProgress`` as an alias of ``In Progress``.
    """

    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_status(self, value):
        status = ComplaintStatus.parse(value)
        if status is None:
            raise serializers.ValidationError(
                f"Invalid status. Must be one of: {', '.join(ComplaintStatus.values)}"
            )
        return status.value


class AssignOfficerSerializer(serializers.Serializer):
    officer_id = serializers.IntegerField(min_value=1)


class CommentCreateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=COMMENT_MAX_LENGTH)


class ComplaintFilterSerializer(serializers.Serializer):
    """Query parameters of ``GET /api/complaints/``."""

    status = serializers.CharField(required=False)
    category = serializers.ChoiceField(choices=ComplaintCategory.choices, required=False)
    department = serializers.ChoiceField(choices=Department.choices, required=False)
    priority = serializers.ChoiceField(choices=ComplaintPriority.choices, required=False)
    submitted_by = serializers.IntegerField(required=False, min_value=1)
    assigned_to = serializers.IntegerField(required=False, min_value=1)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)

    def validate_status(self, value):
        status = ComplaintStatus.parse(value)
        if status is None:
            raise serializers.ValidationError("Unknown status.")
        return status.value


# ════════════════════════════════════════════════════════════════════
#  Response serializers
# ════════════════════════════════════════════════════════════════════

class CommentSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    author = serializers.IntegerField(source="author_id", read_only=True, allow_null=True)
    text = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class StatusChangeSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    status = serializers.CharField(read_only=True)
    changed_by = serializers.IntegerField(read_only=True, allow_null=True)
    changed_at = serializers.DateTimeField(read_only=True)
    notes = serializers.CharField(read_only=True)


class ComplaintSerializer(serializers.Serializer):
    """Full complaint, including comments and the status history."""

    id = serializers.IntegerField(read_only=True)
    human_id = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    department = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    priority = serializers.CharField(read_only=True)
    submitted_by = serializers.IntegerField(read_only=True)
    assigned_to = serializers.IntegerField(read_only=True, allow_null=True)
    address = serializers.CharField(read_only=True)
    latitude = serializers.FloatField(read_only=True, allow_null=True)
    longitude = serializers.FloatField(read_only=True, allow_null=True)
    image_url = serializers.CharField(read_only=True)
    comments = CommentSerializer(many=True, read_only=True)
    status_history = StatusChangeSerializer(many=True, read_only=True)
    resolved_at = serializers.DateTimeField(read_only=True, allow_null=True)
    resolution_notes = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
    version = serializers.IntegerField(read_only=True)


class ComplaintListItemSerializer(serializers.Serializer):
    """Compact row for list views (no comments or history)."""

    id = serializers.IntegerField(read_only=True)
    human_id = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    department = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    priority = serializers.CharField(read_only=True)
    submitted_by = serializers.IntegerField(read_only=True)
    assigned_to = serializers.IntegerField(read_only=True, allow_null=True)
    comment_count = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)

    def get_comment_count(self, obj) -> int:
        return len(obj.comments)


class ComplaintPageSerializer(serializers.Serializer):
    results = ComplaintListItemSerializer(source="items", many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    pages = serializers.IntegerField()
    limit = serializers.IntegerField()


class TrackingHistorySerializer(serializers.Serializer):
    status = serializers.CharField(read_only=True)
    changed_at = serializers.DateTimeField(read_only=True)
    notes = serializers.CharField(read_only=True)


class ComplaintTrackingSerializer(serializers.Serializer):
    """
    Public view used by ``GET /api/complaints/track/{human_id}/``.

    Carries no user ids, comments or location.
    """

    human_id = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    department = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    priority = serializers.CharField(read_only=True)
    status_history = TrackingHistorySerializer(many=True, read_only=True)
    resolved_at = serializers.DateTimeField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
