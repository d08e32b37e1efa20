"""Notification delivery for due reminders and scheduled transactions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Notification:
    """A single due item handed to a notifier."""

    user_id: int
    kind: str  # transaction | reminder
    record_id: int
    title: str
    due_at: datetime
    amount: Optional[float] = None
    phone: Optional[str] = None


class Notifier(Protocol):
    """Delivers notifications; raising marks the item as not sent."""

    def send(self, notification: Notification) -> None:
        ...


class LoggingNotifier:
    """Default notifier that only writes the notification to the log."""

    def send(self, notification: Notification) -> None:
        logger.info(
            "Notification due",
            extra={
                "user_id": notification.user_id,
                "kind": notification.kind,
                "record_id": notification.record_id,
                "title": notification.title,
                "due_at": notification.due_at.isoformat(),
                "amount": notification.amount,
            },
        )

