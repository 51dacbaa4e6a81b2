"""
Complaints app Service Layer.

Views stay thin: they validate input through serializers, call one of
the services below, and wrap the result in a DRF ``Response``.

Architecture
------------
- ``ComplaintService``       — Mutations.  Runs a ``ComplaintWorkflow``
  operation, then hands the returned events to the
  ``NotificationDispatcher``.  Notification failures never reach the
  caller.
- ``ComplaintQueryService``  — Listing, retrieval and public tracking.
- ``build_complaint_service`` / ``build_query_service`` — wire the
  defaults from ``settings.COMPLAINTS`` and ``settings.NOTIFICATIONS``.

Services are plain objects built per request; nothing here is a
module-level singleton.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from django.utils.module_loading import import_string

from core.constants import app_setting
from core.domain.exceptions import NotFoundError
from core.domain.notifications import NotificationDispatcher
from core.domain.pagination import Page
from core.services import build_notification_dispatcher

from .domain import Complaint, WorkflowResult
from .routing import RoutingPolicy
from .stores import (
    ComplaintStore,
    DjangoComplaintStore,
    DjangoUserDirectory,
    UserDirectory,
    get_complaint_or_404,
)
from .workflow import ComplaintWorkflow

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Mutations
# ═══════════════════════════════════════════════════════════════════


class ComplaintService:
    """
    Controller-facing façade over the workflow and the dispatcher.

    Every mutating method returns the saved ``Complaint``; the events the
    workflow produced have already been dispatched by then.
    """

    def __init__(self, workflow: ComplaintWorkflow, dispatcher: NotificationDispatcher) -> None:
        self.workflow = workflow
        self.dispatcher = dispatcher

    def _finish(self, result: WorkflowResult) -> Complaint:
        sent = self.dispatcher.send_all(result.events)
        if len(sent) < len(result.events):
            logger.warning(
                "Complaint %s: %d of %d notifications were not stored",
                result.complaint.human_id,
                len(result.events) - len(sent),
                len(result.events),
            )
        return result.complaint

    def create_complaint(self, data: Mapping[str, Any], submitter_id: Any) -> Complaint:
        return self._finish(self.workflow.create(data, submitter_id))

    def update_status(
        self,
        complaint_id: Any,
        status: Any,
        actor_id: Any,
        notes: str | None = None,
    ) -> Complaint:
        return self._finish(
            self.workflow.update_status(complaint_id, status, actor_id, notes)
        )

    def assign_officer(self, complaint_id: Any, officer_id: Any, actor_id: Any) -> Complaint:
        return self._finish(
            self.workflow.assign_officer(complaint_id, officer_id, actor_id)
        )

    def add_comment(self, complaint_id: Any, author_id: Any, text: str) -> Complaint:
        return self._finish(self.workflow.add_comment(complaint_id, author_id, text))

    def update_complaint(self, complaint_id: Any, changes: Mapping[str, Any]) -> Complaint:
        return self._finish(self.workflow.update_details(complaint_id, changes))

    def delete_complaint(self, complaint_id: Any) -> None:
        self.workflow.delete(complaint_id)


# ═══════════════════════════════════════════════════════════════════
#  Queries
# ═══════════════════════════════════════════════════════════════════


class ComplaintQueryService:
    """Read side: filtered listing, retrieval, tracking and officer queues."""

    def __init__(self, store: ComplaintStore) -> None:
        self.store = store

    def list_complaints(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Complaint]:
        return self.store.find(filters or {}, page=page, limit=limit)

    def get_complaint(self, complaint_id: Any) -> Complaint:
        return get_complaint_or_404(self.store, complaint_id)

    def track(self, human_id: str) -> Complaint:
        """Public lookup by tracking number (``COMP-YYYYMMDD-NNNNN``)."""
        complaint = self.store.find_by_human_id(human_id.strip().upper())
        if complaint is None:
            raise NotFoundError(f"No complaint with tracking id {human_id}.")
        return complaint

    def assigned_to(
        self,
        officer_id: Any,
        *,
        status: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page[Complaint]:
        """The officer's work queue, newest first."""
        filters = {"assigned_to": officer_id}
        if status:
            filters["status"] = status
        return self.store.find(filters, page=page, limit=limit)


# ═══════════════════════════════════════════════════════════════════
#  Wiring
# ═══════════════════════════════════════════════════════════════════


def build_routing_policy() -> RoutingPolicy:
    return import_string(app_setting("COMPLAINTS", "ROUTING_POLICY"))()


def build_complaint_store() -> ComplaintStore:
    return DjangoComplaintStore(default_limit=app_setting("COMPLAINTS", "DEFAULT_PAGE_SIZE"))


def build_complaint_service(
    *,
    store: ComplaintStore | None = None,
    directory: UserDirectory | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> ComplaintService:
    """Assemble a ``ComplaintService`` from settings; any part can be overridden."""
    workflow = ComplaintWorkflow(
        store or build_complaint_store(),
        directory or DjangoUserDirectory(),
        build_routing_policy(),
        human_id_attempts=app_setting("COMPLAINTS", "HUMAN_ID_MAX_ATTEMPTS"),
    )
    return ComplaintService(workflow, dispatcher or build_notification_dispatcher())


def build_query_service(store: ComplaintStore | None = None) -> ComplaintQueryService:
    return ComplaintQueryService(store or build_complaint_store())
