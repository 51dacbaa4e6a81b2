"""
Core app models.

Provides the abstract timestamp base shared by every app, the
``Notification`` record written by the notification dispatcher, and the
push ``DeviceRegistration`` table read by the push gateway.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models

from core.domain.events import NotificationType


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class Notification(TimeStampedModel):
    """
    Notification informing a user about a complaint-related event
    (submission, assignment, status change, resolution, comment).

    The related complaint is stored through a GenericForeignKey, so
    deleting a complaint leaves its notifications in place with a
    dangling reference rather than cascading.
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="Recipient",
    )
    type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
        verbose_name="Type",
    )
    title = models.CharField(max_length=255, verbose_name="Title")
    message = models.TextField(verbose_name="Message")
    is_read = models.BooleanField(default=False, verbose_name="Read")
    read_at = models.DateTimeField(null=True, blank=True, verbose_name="Read At")

    # Generic relation to the object that triggered the notification
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        verbose_name="Related Content Type",
    )
    object_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name="Related Object ID",
    )
    content_object = GenericForeignKey("content_type", "object_id")

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read", "-created_at"], name="notif_recipient_unread_idx"),
            models.Index(fields=["recipient", "-created_at"], name="notif_recipient_recent_idx"),
        ]

    def __str__(self):
        return f"[{self.recipient_id}] {self.title}"


class DeviceRegistration(TimeStampedModel):
    """A device token a user registered for push notifications."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="devices",
        verbose_name="User",
    )
    token = models.CharField(max_length=512, verbose_name="Device Token")
    platform = models.CharField(
        max_length=20,
        default="unknown",
        verbose_name="Platform",
    )

    class Meta:
        verbose_name = "Device Registration"
        verbose_name_plural = "Device Registrations"
        constraints = [
            models.UniqueConstraint(fields=["user", "token"], name="uniq_device_per_user"),
        ]

    def __str__(self):
        return f"{self.platform} device of user {self.user_id}"
