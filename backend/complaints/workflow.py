"""
complaints.workflow — The complaint lifecycle.

``ComplaintWorkflow`` owns every rule about how a complaint changes:
creation with auto-routing, status changes with history, officer
assignment, comments, detail edits and deletion.  Each operation loads
the aggregate from the ``ComplaintStore``, mutates it in memory, saves
it, and returns a ``WorkflowResult`` carrying the ``DomainEvent`` values
that describe who should be told.  Sending those notifications is the
caller's job (see ``complaints.services.ComplaintService``).

Access control is *not* checked here; the API layer decides who may call
which operation.

Event fan-out
-------------
==================  ===========================================================
Operation           Events
==================  ===========================================================
create              ComplaintSubmitted → submitter;
                    ComplaintAssigned → officer (when routed)
update_status       StatusUpdated → submitter;
                    StatusUpdated → assigned officer (unless they acted);
                    ComplaintResolved → submitter (new status Resolved)
assign_officer      ComplaintAssigned → officer; OfficerAssigned → submitter
add_comment         CommentAdded → assigned officer (author is the submitter),
                    otherwise CommentAdded → submitter
update_details      none
delete              none
==================  ===========================================================
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Mapping

from django.utils import timezone

from accounts.models import UserRole
from core.domain.events import Audience, DomainEvent, EventKind
from core.domain.exceptions import NotFoundError, StorageError, ValidationError

from .domain import (
    Comment,
    Complaint,
    ComplaintCategory,
    ComplaintPriority,
    ComplaintStatus,
    StatusChange,
    WorkflowResult,
    department_for,
)
from .identifiers import generate_human_id
from .routing import EarliestJoinedOfficerPolicy, RoutingPolicy
from .stores import ComplaintStore, UserDirectory, get_complaint_or_404

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200
COMMENT_MAX_LENGTH = 500
DEFAULT_HUMAN_ID_ATTEMPTS = 5

#: Fields ``update_details`` may change.
EDITABLE_FIELDS = (
    "title",
    "description",
    "category",
    "priority",
    "address",
    "latitude",
    "longitude",
    "image_url",
)


# ═══════════════════════════════════════════════════════════════════
#  Input checks
# ═══════════════════════════════════════════════════════════════════


def _required_text(value: Any, field: str, max_length: int | None = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field.capitalize()} is required.", field=field)
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            f"{field.capitalize()} cannot exceed {max_length} characters.",
            field=field,
        )
    return value


def _category(value: Any) -> str:
    if value in (None, ""):
        return ComplaintCategory.OTHER.value
    if value not in ComplaintCategory.values:
        raise ValidationError(
            f"Invalid category '{value}'. Expected one of: "
            f"{', '.join(ComplaintCategory.values)}.",
            field="category",
        )
    return ComplaintCategory(value).value


def _priority(value: Any) -> str:
    if value in (None, ""):
        return ComplaintPriority.MEDIUM.value
    if value not in ComplaintPriority.values:
        raise ValidationError(
            f"Invalid priority '{value}'. Expected one of: "
            f"{', '.join(ComplaintPriority.values)}.",
            field="priority",
        )
    return ComplaintPriority(value).value


def _context(complaint: Complaint, **extra: Any) -> dict[str, Any]:
    context = {
        "title": complaint.title,
        "human_id": complaint.human_id,
        "category": complaint.category,
        "status": complaint.status,
    }
    context.update(extra)
    return context


# ═══════════════════════════════════════════════════════════════════
#  Workflow
# ═══════════════════════════════════════════════════════════════════


class ComplaintWorkflow:
    """
    Complaint state machine.

    Parameters
    ----------
    store : ComplaintStore
        Aggregate persistence.
    directory : UserDirectory
        User lookups for routing and assignment.
    routing_policy : RoutingPolicy, optional
        Picks the officer for new complaints.  Defaults to
        ``EarliestJoinedOfficerPolicy``.
    clock : callable, optional
        Returns the current aware ``datetime``; ``timezone.now`` by default.
    rng : random.Random, optional
        Source of human-id suffixes.
    human_id_attempts : int
        Suffix draws before ``create`` gives up with ``StorageError``.
    """

    def __init__(
        self,
        store: ComplaintStore,
        directory: UserDirectory,
        routing_policy: RoutingPolicy | None = None,
        *,
        clock: Callable[[], Any] = timezone.now,
        rng: random.Random | None = None,
        human_id_attempts: int = DEFAULT_HUMAN_ID_ATTEMPTS,
    ) -> None:
        self.store = store
        self.directory = directory
        self.routing_policy = routing_policy or EarliestJoinedOfficerPolicy()
        self.clock = clock
        self.rng = rng
        self.human_id_attempts = max(int(human_id_attempts), 1)

    # ── Creation ─────────────────────────────────────────────────────

    def create(self, data: Mapping[str, Any], submitter_id: Any) -> WorkflowResult:
        """
        File a new complaint for ``submitter_id``.

        The complaint starts Pending with one history entry, gets its
        department from the category and is routed to an officer when the
        routing policy finds one.

        Raises
        ------
        ValidationError
            Missing title/description, or a category/priority outside the
            enumerations.
        StorageError
            No free human id after ``human_id_attempts`` draws.
        """
        title = _required_text(data.get("title"), "title", TITLE_MAX_LENGTH)
        description = _required_text(data.get("description"), "description")
        category = _category(data.get("category"))
        priority = _priority(data.get("priority"))

        now = self.clock()
        officer = self.routing_policy.select(
            self.directory.find_officers(active_only=True)
        )
        complaint = Complaint(
            human_id=self._new_human_id(now),
            title=title,
            description=description,
            category=category,
            department=department_for(category),
            submitted_by=submitter_id,
            status=ComplaintStatus.PENDING.value,
            priority=priority,
            assigned_to=officer.id if officer else None,
            address=(data.get("address") or "").strip(),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            image_url=data.get("image_url") or "",
            status_history=[
                StatusChange(
                    status=ComplaintStatus.PENDING.value,
                    changed_by=submitter_id,
                    changed_at=now,
                    notes="Complaint submitted",
                )
            ],
            created_at=now,
            updated_at=now,
        )
        complaint = self.store.save(complaint)

        events = [
            DomainEvent(
                kind=EventKind.COMPLAINT_SUBMITTED,
                recipient_id=submitter_id,
                complaint_id=complaint.id,
                actor_id=submitter_id,
                context=_context(complaint),
            )
        ]
        if officer is not None:
            events.append(
                DomainEvent(
                    kind=EventKind.COMPLAINT_ASSIGNED,
                    recipient_id=officer.id,
                    complaint_id=complaint.id,
                    audience=Audience.OFFICER,
                    actor_id=submitter_id,
                    context=_context(complaint, officer_name=officer.name),
                )
            )

        logger.info(
            "Complaint %s created by user %s (%s → %s), routed to %s",
            complaint.human_id,
            submitter_id,
            category,
            complaint.department,
            officer.id if officer else "nobody",
        )
        return WorkflowResult(complaint, events)

    def _new_human_id(self, now) -> str:
        for attempt in range(1, self.human_id_attempts + 1):
            human_id = generate_human_id(now.date(), self.rng)
            if self.store.find_by_human_id(human_id) is None:
                return human_id
            logger.warning(
                "Human id %s already taken (attempt %d/%d)",
                human_id,
                attempt,
                self.human_id_attempts,
            )
        raise StorageError(
            f"Could not allocate a unique complaint id after "
            f"{self.human_id_attempts} attempts."
        )

    # ── Status ───────────────────────────────────────────────────────

    def update_status(
        self,
        complaint_id: Any,
        new_status: Any,
        actor_id: Any,
        notes: str | None = None,
    ) -> WorkflowResult:
        """
        Move the complaint to ``new_status`` and record it in the history.

        Any status may follow any other.  Entering Resolved stamps
        ``resolved_at`` (and ``resolution_notes`` when ``notes`` is given);
        leaving it does not clear them.

        Raises
        ------
        NotFoundError
            No such complaint.
        ValidationError
            ``new_status`` is not a known status.
        """
        complaint = get_complaint_or_404(self.store, complaint_id)
        status = ComplaintStatus.parse(new_status)
        if status is None:
            raise ValidationError(
                f"Invalid status '{new_status}'. Expected one of: "
                f"{', '.join(ComplaintStatus.values)}.",
                field="status",
            )

        now = self.clock()
        old_status = complaint.status
        new_value = status.value
        notes = (notes or "").strip() or None

        complaint.status = new_value
        complaint.status_history.append(
            StatusChange(
                status=new_value,
                changed_by=actor_id,
                changed_at=now,
                notes=notes or f"Status changed from {old_status} to {new_value}",
            )
        )
        if new_value == ComplaintStatus.RESOLVED:
            complaint.resolved_at = now
            if notes:
                complaint.resolution_notes = notes
        complaint.updated_at = now
        complaint = self.store.save(complaint)

        context = _context(complaint, old_status=old_status, new_status=new_value)
        events = [
            DomainEvent(
                kind=EventKind.STATUS_UPDATED,
                recipient_id=complaint.submitted_by,
                complaint_id=complaint.id,
                actor_id=actor_id,
                context=context,
            )
        ]
        if complaint.assigned_to is not None and complaint.assigned_to != actor_id:
            events.append(
                DomainEvent(
                    kind=EventKind.STATUS_UPDATED,
                    recipient_id=complaint.assigned_to,
                    complaint_id=complaint.id,
                    audience=Audience.OFFICER,
                    actor_id=actor_id,
                    context=context,
                )
            )
        if new_value == ComplaintStatus.RESOLVED:
            events.append(
                DomainEvent(
                    kind=EventKind.COMPLAINT_RESOLVED,
                    recipient_id=complaint.submitted_by,
                    complaint_id=complaint.id,
                    actor_id=actor_id,
                    context=context,
                )
            )

        logger.info(
            "Complaint %s status %s → %s by user %s",
            complaint.human_id,
            old_status,
            new_value,
            actor_id,
        )
        return WorkflowResult(complaint, events)

    # ── Assignment ───────────────────────────────────────────────────

    def assign_officer(self, complaint_id: Any, officer_id: Any, actor_id: Any) -> WorkflowResult:
        """
        Hand the complaint to ``officer_id``.  The status is unchanged but
        the assignment is recorded in the history.

        Raises
        ------
        NotFoundError
            No such complaint.
        ValidationError
            ``officer_id`` is not an existing user with the Officer role.
        """
        complaint = get_complaint_or_404(self.store, complaint_id)
        officer = self.directory.find_user_by_id(officer_id)
        if officer is None or officer.role != UserRole.OFFICER:
            raise ValidationError("Invalid officer.", field="officer_id")

        now = self.clock()
        previous = complaint.assigned_to
        complaint.assigned_to = officer.id
        complaint.status_history.append(
            StatusChange(
                status=complaint.status,
                changed_by=officer.id,
                changed_at=now,
                notes=f"Complaint assigned to officer: {officer.name}",
            )
        )
        complaint.updated_at = now
        complaint = self.store.save(complaint)

        context = _context(complaint, officer_name=officer.name)
        events = [
            DomainEvent(
                kind=EventKind.COMPLAINT_ASSIGNED,
                recipient_id=officer.id,
                complaint_id=complaint.id,
                audience=Audience.OFFICER,
                actor_id=actor_id,
                context=context,
            ),
            DomainEvent(
                kind=EventKind.OFFICER_ASSIGNED,
                recipient_id=complaint.submitted_by,
                complaint_id=complaint.id,
                actor_id=actor_id,
                context=context,
            ),
        ]

        logger.info(
            "Complaint %s assigned to officer %s (was %s) by user %s",
            complaint.human_id,
            officer.id,
            previous,
            actor_id,
        )
        return WorkflowResult(complaint, events)

    # ── Comments ─────────────────────────────────────────────────────

    def add_comment(self, complaint_id: Any, author_id: Any, text: Any) -> WorkflowResult:
        """
        Append a comment and notify the other side of the complaint.

        A submitter commenting on an unassigned complaint produces no event.

        Raises
        ------
        NotFoundError
            No such complaint.
        ValidationError
            Blank text or more than ``COMMENT_MAX_LENGTH`` characters.
        """
        complaint = get_complaint_or_404(self.store, complaint_id)
        text = _required_text(text, "text", COMMENT_MAX_LENGTH)

        now = self.clock()
        complaint.comments.append(Comment(author_id=author_id, text=text, created_at=now))
        complaint.updated_at = now
        complaint = self.store.save(complaint)

        if author_id == complaint.submitted_by:
            recipient, audience = complaint.assigned_to, Audience.OFFICER
        else:
            recipient, audience = complaint.submitted_by, Audience.CITIZEN

        events = []
        if recipient is not None:
            events.append(
                DomainEvent(
                    kind=EventKind.COMMENT_ADDED,
                    recipient_id=recipient,
                    complaint_id=complaint.id,
                    audience=audience,
                    actor_id=author_id,
                    context=_context(complaint),
                )
            )

        logger.info(
            "Comment added to complaint %s by user %s (notifying %s)",
            complaint.human_id,
            author_id,
            recipient if recipient is not None else "nobody",
        )
        return WorkflowResult(complaint, events)

    # ── Details ──────────────────────────────────────────────────────

    def update_details(self, complaint_id: Any, changes: Mapping[str, Any]) -> WorkflowResult:
        """
        Edit the descriptive fields listed in ``EDITABLE_FIELDS``.

        Other keys (``status``, ``human_id``, ``submitted_by`` …) are
        ignored.  Changing the category re-derives the department.
        """
        complaint = get_complaint_or_404(self.store, complaint_id)
        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}

        if "title" in changes:
            complaint.title = _required_text(changes["title"], "title", TITLE_MAX_LENGTH)
        if "description" in changes:
            complaint.description = _required_text(changes["description"], "description")
        if "category" in changes:
            complaint.category = _category(changes["category"])
            complaint.department = department_for(complaint.category)
        if "priority" in changes:
            complaint.priority = _priority(changes["priority"])
        if "address" in changes:
            complaint.address = (changes["address"] or "").strip()
        for name in ("latitude", "longitude"):
            if name in changes:
                setattr(complaint, name, changes[name])
        if "image_url" in changes:
            complaint.image_url = changes["image_url"] or ""

        complaint.updated_at = self.clock()
        complaint = self.store.save(complaint)

        logger.info(
            "Complaint %s details updated (%s)",
            complaint.human_id,
            ", ".join(sorted(changes)) or "no fields",
        )
        return WorkflowResult(complaint, [])

    # ── Deletion ─────────────────────────────────────────────────────

    def delete(self, complaint_id: Any) -> None:
        """
        Hard-delete the complaint with its comments and history.

        Notifications that reference it are left in place.
        """
        if not self.store.delete_by_id(complaint_id):
            raise NotFoundError(f"Complaint {complaint_id} not found.")
        logger.info("Complaint %s deleted", complaint_id)
