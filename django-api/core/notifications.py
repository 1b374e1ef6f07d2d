"""Best-effort notification dispatch.

Notifications are sent after the surrounding transaction commits. A failing
notifier is logged and never undoes the state change that triggered it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Interface for user notification delivery (email, WhatsApp, ...)."""

    @abstractmethod
    def notify(self, user_id: UUID, event: str, payload: dict[str, Any]) -> None:
        """Deliver ``event`` to ``user_id``. May raise on delivery failure."""
        ...


class LoggingNotifier(Notifier):
    """Default notifier: writes the notification to the log."""

    def notify(self, user_id: UUID, event: str, payload: dict[str, Any]) -> None:
        logger.info(
            "Notification %s",
            event,
            extra={"user_id": str(user_id), "notification": event, "payload": payload},
        )


def get_notifier() -> Notifier:
    path = settings.COMMERCE.get("NOTIFIER", "core.notifications.LoggingNotifier")
    return import_string(path)()


def notify_on_commit(
    notifier: Notifier, user_id: UUID, event: str, payload: dict[str, Any]
) -> None:
    """Schedule ``notifier.notify`` for after the current transaction commits."""

    def send() -> None:
        try:
            notifier.notify(user_id, event, payload)
        except Exception:
            logger.exception(
                "Notification delivery failed",
                extra={"user_id": str(user_id), "notification": event},
            )

    transaction.on_commit(send)
