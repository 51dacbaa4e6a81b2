"""
Core constants — **Single Source of Truth** for project-wide defaults.

App-level tunables live in two settings dicts (``COMPLAINTS`` and
``NOTIFICATIONS``).  Any key missing from ``settings.py`` falls back to
the defaults below, so a bare settings module still runs.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings

COMPLAINT_DEFAULTS: dict[str, Any] = {
    # Dotted path of the RoutingPolicy used for new complaints.
    "ROUTING_POLICY": "complaints.routing.EarliestJoinedOfficerPolicy",
    # Human-id suffix draws before giving up with StorageError.
    "HUMAN_ID_MAX_ATTEMPTS": 5,
    "DEFAULT_PAGE_SIZE": 10,
}

NOTIFICATION_DEFAULTS: dict[str, Any] = {
    "PUSH_GATEWAY": "core.push.LoggingPushGateway",
    "DEFAULT_PAGE_SIZE": 50,
}

_SECTIONS: dict[str, dict[str, Any]] = {
    "COMPLAINTS": COMPLAINT_DEFAULTS,
    "NOTIFICATIONS": NOTIFICATION_DEFAULTS,
}


def app_setting(section: str, key: str) -> Any:
    """
    Read ``settings.<section>[<key>]`` with the default above as fallback.

    Example::

        app_setting("COMPLAINTS", "HUMAN_ID_MAX_ATTEMPTS")  # → 5
    """
    configured = getattr(settings, section, None) or {}
    if key in configured:
        return configured[key]
    return _SECTIONS[section][key]
