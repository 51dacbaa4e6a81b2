"""
Officer routing policies.

A ``RoutingPolicy`` picks the officer a newly created complaint is routed
to, given the current roster.  Routing is advisory: the roster is read
without locks, so two concurrent submissions may land on the same
officer, and an empty roster simply leaves the complaint unassigned.

The active policy is chosen by ``settings.COMPLAINTS["ROUTING_POLICY"]``.
"""

from __future__ import annotations

import abc
import datetime
from typing import Sequence

from accounts.models import UserRole

from .domain import UserRef

_EPOCH = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


def _eligible(roster: Sequence[UserRef]) -> list[UserRef]:
    return [u for u in roster if u.is_active and u.role == UserRole.OFFICER]


def _joined_key(officer: UserRef):
    return (officer.date_joined or _EPOCH, officer.id)


class RoutingPolicy(abc.ABC):
    """Strategy interface for auto-routing."""

    @abc.abstractmethod
    def select(self, roster: Sequence[UserRef]) -> UserRef | None:
        """Return the officer to assign, or ``None`` to leave the complaint unassigned."""


class EarliestJoinedOfficerPolicy(RoutingPolicy):
    """
    Active officer with the earliest account creation; ties by id.

    A coarse stand-in for round-robin: it ignores how many complaints
    each officer already holds.
    """

    def select(self, roster: Sequence[UserRef]) -> UserRef | None:
        officers = _eligible(roster)
        if not officers:
            return None
        return min(officers, key=_joined_key)


class LeastLoadedOfficerPolicy(RoutingPolicy):
    """Active officer with the fewest open complaints; ties by earliest account."""

    def select(self, roster: Sequence[UserRef]) -> UserRef | None:
        officers = _eligible(roster)
        if not officers:
            return None
        return min(officers, key=lambda o: (o.open_complaints, *_joined_key(o)))
