"""
complaints.stores — Persistence collaborators of the complaint workflow.

``ComplaintStore`` loads and saves whole ``Complaint`` aggregates;
``UserDirectory`` answers the two user questions the workflow has
(who is this user, and who are the officers).  The Django implementations
map between ``complaints.domain`` dataclasses and ORM rows so the workflow
never touches a queryset.

Saving
------
* A complaint without an ``id`` is inserted with ``version = 1``.
* An existing complaint is written with ``compare_and_swap`` so a stale
  copy raises ``ConcurrentUpdateError`` instead of overwriting a newer
  one.
* Comments and history entries without an ``id`` are appended; stored
  entries are never rewritten.
"""

from __future__ import annotations

import abc
from typing import Any, Mapping

from django.contrib.auth import get_user_model

from core.domain.exceptions import NotFoundError
from core.domain.pagination import Page, normalise_window
from core.domain.transactions import compare_and_swap, guarded, run_in_atomic

from . import models as orm
from .domain import Comment, Complaint, StatusChange, UserRef

DEFAULT_COMPLAINT_PAGE_SIZE = 10

#: Filters accepted by ``ComplaintStore.find``; anything else is ignored.
FILTER_FIELDS = (
    "status",
    "category",
    "department",
    "priority",
    "submitted_by",
    "assigned_to",
)

#: Scalar aggregate fields copied verbatim to the ``Complaint`` row.
_SCALAR_FIELDS = (
    "human_id",
    "title",
    "description",
    "category",
    "department",
    "status",
    "priority",
    "address",
    "latitude",
    "longitude",
    "image_url",
    "resolved_at",
    "resolution_notes",
    "created_at",
    "updated_at",
)


# ═══════════════════════════════════════════════════════════════════
#  Interfaces
# ═══════════════════════════════════════════════════════════════════


class ComplaintStore(abc.ABC):
    """Aggregate persistence for complaints."""

    @abc.abstractmethod
    def find_by_id(self, complaint_id: Any) -> Complaint | None:
        ...

    @abc.abstractmethod
    def find_by_human_id(self, human_id: str) -> Complaint | None:
        ...

    @abc.abstractmethod
    def save(self, complaint: Complaint) -> Complaint:
        """
        Persist ``complaint`` and return it with ids and ``version`` filled in.

        Raises ``ConcurrentUpdateError`` when the stored version moved on.
        """

    @abc.abstractmethod
    def delete_by_id(self, complaint_id: Any) -> bool:
        """Hard-delete; returns ``False`` when nothing was there."""

    @abc.abstractmethod
    def find(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Complaint]:
        """Newest first, paginated."""


class UserDirectory(abc.ABC):
    """Read-only view of users for routing and assignment."""

    @abc.abstractmethod
    def find_user_by_id(self, user_id: Any) -> UserRef | None:
        ...

    @abc.abstractmethod
    def find_officers(self, active_only: bool = True) -> list[UserRef]:
        """Officers ordered by account creation, with ``open_complaints`` set."""


# ═══════════════════════════════════════════════════════════════════
#  Django ORM implementations
# ═══════════════════════════════════════════════════════════════════


def _to_domain(row: orm.Complaint) -> Complaint:
    return Complaint(
        id=row.pk,
        version=row.version,
        submitted_by=row.submitted_by_id,
        assigned_to=row.assigned_to_id,
        comments=[
            Comment(
                id=c.pk,
                author_id=c.author_id,
                text=c.text,
                created_at=c.created_at,
            )
            for c in row.comments.all()
        ],
        status_history=[
            StatusChange(
                id=h.pk,
                status=h.status,
                changed_by=h.changed_by_id,
                changed_at=h.changed_at,
                notes=h.notes,
            )
            for h in row.status_history.all()
        ],
        **{name: getattr(row, name) for name in _SCALAR_FIELDS},
    )


class DjangoComplaintStore(ComplaintStore):
    """``ComplaintStore`` backed by ``complaints.models``."""

    def __init__(self, default_limit: int = DEFAULT_COMPLAINT_PAGE_SIZE) -> None:
        self.default_limit = default_limit

    @staticmethod
    def _queryset():
        return orm.Complaint.objects.prefetch_related("comments", "status_history")

    @guarded("loading a complaint")
    def find_by_id(self, complaint_id: Any) -> Complaint | None:
        try:
            row = self._queryset().get(pk=complaint_id)
        except (orm.Complaint.DoesNotExist, ValueError, TypeError):
            return None
        return _to_domain(row)

    @guarded("loading a complaint by tracking id")
    def find_by_human_id(self, human_id: str) -> Complaint | None:
        row = self._queryset().filter(human_id=human_id).first()
        return _to_domain(row) if row is not None else None

    @guarded("saving a complaint")
    def save(self, complaint: Complaint) -> Complaint:
        return run_in_atomic(self._save, complaint)

    def _save(self, complaint: Complaint) -> Complaint:
        fields = {name: getattr(complaint, name) for name in _SCALAR_FIELDS}
        fields["assigned_to_id"] = complaint.assigned_to

        if complaint.id is None:
            row = orm.Complaint.objects.create(
                submitted_by_id=complaint.submitted_by,
                version=1,
                **fields,
            )
            complaint.id = row.pk
            complaint.version = row.version
        else:
            complaint.version = compare_and_swap(
                orm.Complaint,
                pk=complaint.id,
                expected_version=complaint.version,
                **fields,
            )

        for comment in complaint.comments:
            if comment.id is None:
                comment.id = orm.ComplaintComment.objects.create(
                    complaint_id=complaint.id,
                    author_id=comment.author_id,
                    text=comment.text,
                    created_at=comment.created_at,
                ).pk
        for entry in complaint.status_history:
            if entry.id is None:
                entry.id = orm.ComplaintStatusChange.objects.create(
                    complaint_id=complaint.id,
                    status=entry.status,
                    changed_by_id=entry.changed_by,
                    changed_at=entry.changed_at,
                    notes=entry.notes or "",
                ).pk
        return complaint

    @guarded("deleting a complaint")
    def delete_by_id(self, complaint_id: Any) -> bool:
        deleted, _ = orm.Complaint.objects.filter(pk=complaint_id).delete()
        return bool(deleted)

    @guarded("listing complaints")
    def find(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Complaint]:
        page, limit, offset = normalise_window(page, limit, self.default_limit)
        lookups = {
            (f"{key}_id" if key in ("submitted_by", "assigned_to") else key): value
            for key, value in (filters or {}).items()
            if key in FILTER_FIELDS and value not in (None, "")
        }
        qs = self._queryset().filter(**lookups).order_by("-created_at", "-id")
        total = qs.count()
        return Page(
            items=[_to_domain(row) for row in qs[offset:offset + limit]],
            total=total,
            page=page,
            limit=limit,
        )


class DjangoUserDirectory(UserDirectory):
    """``UserDirectory`` over the project's custom user model."""

    @staticmethod
    def _to_ref(user, open_complaints: int = 0) -> UserRef:
        return UserRef(
            id=user.pk,
            name=user.display_name,
            role=user.role,
            is_active=user.is_active,
            date_joined=user.date_joined,
            open_complaints=open_complaints,
        )

    @guarded("loading a user")
    def find_user_by_id(self, user_id: Any) -> UserRef | None:
        User = get_user_model()
        try:
            user = User.objects.get(pk=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            return None
        return self._to_ref(user)

    @guarded("loading the officer roster")
    def find_officers(self, active_only: bool = True) -> list[UserRef]:
        from accounts.services import UserManagementService

        return [
            self._to_ref(officer, officer.open_complaints)
            for officer in UserManagementService.list_officers(active_only=active_only)
        ]


def get_complaint_or_404(store: ComplaintStore, complaint_id: Any) -> Complaint:
    """Load a complaint or raise ``NotFoundError``."""
    complaint = store.find_by_id(complaint_id)
    if complaint is None:
        raise NotFoundError(f"Complaint {complaint_id} not found.")
    return complaint
