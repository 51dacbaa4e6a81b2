"""
Complaints app models.

Relational storage for the complaint aggregate: the ``Complaint`` row
plus its append-only ``ComplaintComment`` and ``ComplaintStatusChange``
children.  Business rules live in ``workflow.py``; these models are only
read and written through ``stores.DjangoComplaintStore``.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from .domain import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintStatus,
    Department,
)

__all__ = [
    "Complaint",
    "ComplaintCategory",
    "ComplaintComment",
    "ComplaintPriority",
    "ComplaintStatus",
    "ComplaintStatusChange",
    "Department",
]


class Complaint(models.Model):
    """
    A civic-issue complaint filed by a citizen.

    * ``human_id`` is the public tracking number (``COMP-YYYYMMDD-NNNNN``).
    * ``department`` is always derived from ``category``.
    * ``version`` backs optimistic concurrency control in the store.
    """

    human_id = models.CharField(
        max_length=20,
        unique=True,
        verbose_name="Complaint ID",
    )
    title = models.CharField(max_length=200, verbose_name="Title")
    description = models.TextField(verbose_name="Description")
    category = models.CharField(
        max_length=20,
        choices=ComplaintCategory.choices,
        default=ComplaintCategory.OTHER,
        verbose_name="Category",
        db_index=True,
    )
    department = models.CharField(
        max_length=30,
        choices=Department.choices,
        default=Department.GENERAL,
        verbose_name="Department",
        db_index=True,
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    priority = models.CharField(
        max_length=10,
        choices=ComplaintPriority.choices,
        default=ComplaintPriority.MEDIUM,
        verbose_name="Priority",
    )

    # ── Location ────────────────────────────────────────────────────
    address = models.CharField(max_length=500, blank=True, default="", verbose_name="Address")
    latitude = models.FloatField(null=True, blank=True, verbose_name="Latitude")
    longitude = models.FloatField(null=True, blank=True, verbose_name="Longitude")
    image_url = models.URLField(max_length=500, blank=True, default="", verbose_name="Image URL")

    # ── People ──────────────────────────────────────────────────────
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="submitted_complaints",
        verbose_name="Submitted By",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned Officer",
    )

    # ── Resolution ──────────────────────────────────────────────────
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name="Resolved At")
    resolution_notes = models.TextField(null=True, blank=True, verbose_name="Resolution Notes")

    # Set by the workflow clock, not auto_now, so history and human_id agree.
    created_at = models.DateTimeField(default=timezone.now, verbose_name="Created At")
    updated_at = models.DateTimeField(default=timezone.now, verbose_name="Updated At")
    version = models.PositiveIntegerField(default=1, verbose_name="Version")

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["-created_at"], name="complaint_recent_idx"),
        ]

    def __str__(self):
        return f"{self.human_id} — {self.title}"


class ComplaintComment(models.Model):
    """One message in a complaint's discussion thread (append-only)."""

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Complaint",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="complaint_comments",
        verbose_name="Author",
    )
    text = models.TextField(verbose_name="Text")
    created_at = models.DateTimeField(default=timezone.now, verbose_name="Created At")

    class Meta:
        verbose_name = "Complaint Comment"
        verbose_name_plural = "Complaint Comments"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Comment by {self.author_id} on {self.complaint_id}"


class ComplaintStatusChange(models.Model):
    """
    Immutable audit trail entry: the status after the change, who made
    it, when, and a free-text note.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="status_history",
        verbose_name="Complaint",
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        verbose_name="Status",
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="complaint_status_changes",
        verbose_name="Changed By",
    )
    changed_at = models.DateTimeField(verbose_name="Changed At")
    notes = models.TextField(blank=True, default="", verbose_name="Notes")

    class Meta:
        verbose_name = "Complaint Status Change"
        verbose_name_plural = "Complaint Status Changes"
        ordering = ["changed_at", "id"]

    def __str__(self):
        return f"{self.complaint_id}: → {self.status}"
