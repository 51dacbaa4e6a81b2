"""
core.push — External push-delivery hook.

The dispatcher hands every persisted notification to a ``PushGateway``.
Real delivery (FCM / APNS / web-push) is outside this project; the
default gateway resolves the recipient's registered devices and logs the
delivery it would perform.  Swap the implementation through
``settings.NOTIFICATIONS["PUSH_GATEWAY"]``.
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from django.apps import apps

if TYPE_CHECKING:
    from core.stores import NotificationRecord

logger = logging.getLogger(__name__)


class PushGateway(abc.ABC):
    """Fire-and-forget delivery of a notification to the recipient's devices."""

    @abc.abstractmethod
    def push(self, notification: NotificationRecord) -> None:
        """Deliver ``notification``; may raise, the dispatcher absorbs it."""


class NullPushGateway(PushGateway):
    """Does nothing.  Useful for tests and batch imports."""

    def push(self, notification: NotificationRecord) -> None:
        return None


class LoggingPushGateway(PushGateway):
    """
    Logs the push that would be sent to each registered device.

    Users without registered devices are skipped with a DEBUG line.
    """

    def push(self, notification: NotificationRecord) -> None:
        DeviceRegistration = apps.get_model("core", "DeviceRegistration")
        devices = list(
            DeviceRegistration.objects
            .filter(user_id=notification.recipient_id)
            .values_list("platform", "token")
        )
        if not devices:
            logger.debug(
                "No push devices for user %s; notification %s stored only",
                notification.recipient_id,
                notification.id,
            )
            return

        for platform, token in devices:
            logger.info(
                "Push [%s] to user %s on %s device %s…: %s",
                notification.type,
                notification.recipient_id,
                platform,
                token[:8],
                notification.title,
            )
