"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule and persistence failures inside
the service layers.  They are deliberately **not** DRF exceptions so that
the workflow stays framework-agnostic.  ``core.domain.exception_handler``
maps them to HTTP responses.

Mapping cheatsheet
------------------
┌───────────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception          │ Meaning                      │ Code │
├───────────────────────────┼──────────────────────────────┼──────┤
│ DomainError               │ generic business-rule error  │ 400  │
│ ValidationError           │ bad enum / field / officer   │ 400  │
│ NotFoundError             │ complaint/notification/user  │ 404  │
│ Conflict                  │ state conflict               │ 409  │
│ ConcurrentUpdateError     │ stale optimistic version     │ 409  │
│ StorageError              │ persistence backend failure  │ 503  │
│ NotificationDeliveryError │ never leaves the dispatcher  │  —   │
└───────────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import ValidationError

    if new_status not in ComplaintStatus.values:
        raise ValidationError(f"Invalid status '{new_status}'.")
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(DomainError):
    """
    Input that the workflow refuses: an unknown status or category, a
    blank required field, or an assignment target that is not an officer.

    Maps to HTTP 400.  ``field`` names the offending attribute when known.
    """

    def __init__(self, message: str = "Invalid input.", *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """
    The requested complaint, notification or user does not exist (or is
    not owned by the requesting user, for ownership-scoped lookups).

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class ConcurrentUpdateError(Conflict):
    """
    Another writer saved the aggregate after it was loaded.

    Raised by stores that implement optimistic versioning; the caller may
    reload and retry.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        entity: str = "Complaint",
        pk: object = None,
        expected_version: int | None = None,
    ) -> None:
        if message is None:
            message = (
                f"{entity} {pk} was modified concurrently "
                f"(expected version {expected_version}); reload and retry."
            )
        super().__init__(message)
        self.entity = entity
        self.pk = pk
        self.expected_version = expected_version


class StorageError(DomainError):
    """
    The persistence backend failed (connection loss, constraint the
    workflow could not anticipate, exhausted identifier retries).

    Maps to HTTP 503.
    """

    def __init__(self, message: str = "The storage backend is unavailable.") -> None:
        super().__init__(message)


class NotificationDeliveryError(DomainError):
    """
    A notification could not be pushed to the recipient's devices.

    Always caught and logged by ``NotificationDispatcher``; it never
    reaches a caller of the complaint workflow.
    """

    def __init__(self, message: str = "Notification delivery failed.", *, notification_id: object = None) -> None:
        super().__init__(message)
        self.notification_id = notification_id
