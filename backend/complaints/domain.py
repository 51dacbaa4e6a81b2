"""
Complaint domain types.

Enumerations, the category → department table, and the plain dataclasses
the workflow reads and mutates.  Nothing here touches the ORM; the
``DjangoComplaintStore`` maps these to and from ``complaints.models``.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any

from django.db import models

from core.domain.events import DomainEvent


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class ComplaintCategory(models.TextChoices):
    ROAD = "Road", "Road"
    WATER = "Water", "Water"
    ELECTRICITY = "Electricity", "Electricity"
    SANITATION = "Sanitation", "Sanitation"
    OTHER = "Other", "Other"


class Department(models.TextChoices):
    PUBLIC_WORKS = "Public Works", "Public Works"
    WATER_SUPPLY = "Water Supply", "Water Supply"
    ELECTRICITY_BOARD = "Electricity Board", "Electricity Board"
    SANITATION_DEPARTMENT = "Sanitation Department", "Sanitation Department"
    GENERAL = "General", "General"


class ComplaintStatus(models.TextChoices):
    """
    Lifecycle states.  There is no transition table: any status may
    follow any other, including leaving Resolved or Rejected.
    """

    PENDING = "Pending", "Pending"
    IN_PROGRESS = "In Progress", "In Progress"
    RESOLVED = "Resolved", "Resolved"
    REJECTED = "Rejected", "Rejected"

    @classmethod
    def open_values(cls) -> list[str]:
        """Statuses that still need officer work."""
        return [cls.PENDING, cls.IN_PROGRESS]

    @classmethod
    def parse(cls, value: Any) -> ComplaintStatus | None:
        """
        Resolve a submitted status.

        Accepts the stored value (``"In Progress"``), the member name
        (``"IN_PROGRESS"``) and the compact spelling ``"InProgress"``.
        Returns ``None`` for anything else.
        """
        if not isinstance(value, str):
            return None
        if value in cls.values:
            return cls(value)
        compact = value.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == compact:
                return member
        return None


class ComplaintPriority(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"
    URGENT = "Urgent", "Urgent"


#: Fixed category → department routing table.
CATEGORY_DEPARTMENTS: dict[str, str] = {
    ComplaintCategory.ROAD: Department.PUBLIC_WORKS,
    ComplaintCategory.WATER: Department.WATER_SUPPLY,
    ComplaintCategory.ELECTRICITY: Department.ELECTRICITY_BOARD,
    ComplaintCategory.SANITATION: Department.SANITATION_DEPARTMENT,
    ComplaintCategory.OTHER: Department.GENERAL,
}


def department_for(category: Any) -> str:
    """Department responsible for ``category``; anything unmapped goes to General."""
    return CATEGORY_DEPARTMENTS.get(category, Department.GENERAL)


# ────────────────────────────────────────────────────────────────────
# Aggregate
# ────────────────────────────────────────────────────────────────────

@dataclass
class Comment:
    author_id: Any
    text: str
    created_at: datetime.datetime
    id: Any = None


@dataclass
class StatusChange:
    status: str
    changed_by: Any
    changed_at: datetime.datetime
    notes: str = ""
    id: Any = None


@dataclass
class Complaint:
    """
    The complaint aggregate.

    ``comments`` and ``status_history`` are append-only; entries without
    an ``id`` have not been persisted yet.  ``version`` is bumped by the
    store on every save.
    """

    human_id: str
    title: str
    description: str
    category: str
    department: str
    submitted_by: Any
    status: str = ComplaintStatus.PENDING
    priority: str = ComplaintPriority.MEDIUM
    assigned_to: Any = None
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    image_url: str = ""
    comments: list[Comment] = field(default_factory=list)
    status_history: list[StatusChange] = field(default_factory=list)
    resolved_at: datetime.datetime | None = None
    resolution_notes: str | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None
    id: Any = None
    version: int = 0

    @property
    def is_open(self) -> bool:
        return self.status in ComplaintStatus.open_values()


# ────────────────────────────────────────────────────────────────────
# Collaborator views and results
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UserRef:
    """What the workflow needs to know about a user."""

    id: Any
    name: str
    role: str
    is_active: bool = True
    date_joined: datetime.datetime | None = None
    open_complaints: int = 0


@dataclass
class WorkflowResult:
    """A workflow operation's outcome: the saved aggregate plus the events to dispatch."""

    complaint: Complaint
    events: list[DomainEvent] = field(default_factory=list)
