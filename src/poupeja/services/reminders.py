"""Reminders (lembretes) and the periodic sweep over due items.

The sweep has two passes: :func:`mark_overdue` flags pending scheduled
transactions whose date has passed, and :func:`dispatch_due` hands reminders
and scheduled transactions due within the notification window to a
:class:`~poupeja.services.notifications.Notifier`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update
from sqlmodel import select

from ..domain.repositories import ReminderRepository
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.reminder import REMINDER_PENDING, REMINDER_SENT, Reminder
from ..models.transaction import FORMATO_SCHEDULE, STATUS_OVERDUE, STATUS_PENDING, Transaction
from ..models.user import User
from .notifications import Notification, Notifier
from .recurrence import normalize_recurrence
from .reference_codes import next_reference_code

logger = get_logger(__name__)

DEFAULT_WINDOW = timedelta(minutes=10)


def create_reminder(
    session_factory: SessionFactory,
    *,
    user_id: int,
    description: str,
    date: datetime,
    name: Optional[str] = None,
    amount: Optional[float] = None,
    recurrence: Optional[str] = None,
    phone: Optional[str] = None,
) -> Reminder:
    """Store a reminder with its own reference code."""

    description = (description or "").strip()
    if not description:
        raise ValueError("Reminder description is required")
    if date is None:
        raise ValueError("Reminder date is required")
    with session_factory() as session:
        code = str(next_reference_code(session))
        reminder = Reminder(
            user_id=user_id,
            name=(name or "").strip() or None,
            description=description,
            amount=amount,
            date=date,
            recurrence=normalize_recurrence(recurrence),
            reference_code=code,
            codigo_trans=code,
            phone=phone,
        )
        session.add(reminder)
        session.flush()
        session.refresh(reminder)
        session.expunge(reminder)
    logger.info("Reminder created", extra={"user_id": user_id, "reminder_id": reminder.id})
    return reminder


_REMINDER_FIELDS = {"name", "description", "amount", "date", "recurrence", "phone", "situacao"}


def update_reminder(
    repo: ReminderRepository, *, user_id: int, reminder_id: int, **changes
) -> Optional[Reminder]:
    """Edit a reminder; moving its date re-arms the notification."""

    unknown = set(changes) - _REMINDER_FIELDS
    if unknown:
        raise ValueError(f"Cannot update reminder fields: {', '.join(sorted(unknown))}")
    reminder = repo.get_by_id(reminder_id, user_id=user_id)
    if reminder is None:
        return None
    if "description" in changes and not (changes["description"] or "").strip():
        raise ValueError("Reminder description is required")
    if "date" in changes:
        if changes["date"] is None:
            raise ValueError("Reminder date is required")
        if changes["date"] != reminder.date:
            reminder.status = REMINDER_PENDING
            reminder.notification_sent = False
    if "recurrence" in changes:
        changes["recurrence"] = normalize_recurrence(changes["recurrence"])
    for key, value in changes.items():
        setattr(reminder, key, value)
    return repo.update(reminder, user_id=user_id)


def reminder_to_dict(reminder: Reminder) -> dict[str, object]:
    return {
        "id": reminder.id,
        "name": reminder.name,
        "description": reminder.description,
        "amount": reminder.amount,
        "date": reminder.date.isoformat(),
        "status": reminder.status,
        "situacao": reminder.situacao,
        "recurrence": reminder.recurrence,
        "reference_code": reminder.reference_code,
        "notification_sent": reminder.notification_sent,
    }


def mark_overdue(session_factory: SessionFactory, *, now: Optional[datetime] = None) -> int:
    """Flag pending scheduled transactions dated before ``now`` as overdue."""

    now = now or datetime.now()
    with session_factory() as session:
        result = session.execute(
            update(Transaction)
            .where(Transaction.formato == FORMATO_SCHEDULE)
            .where(Transaction.status == STATUS_PENDING)
            .where(Transaction.date < now)
            .values(status=STATUS_OVERDUE)
            .execution_options(synchronize_session=False)
        )
        count = result.rowcount or 0
    if count:
        logger.info("Scheduled transactions marked overdue", extra={"count": count})
    return count


@dataclass
class SweepResult:
    overdue: int = 0
    sent: int = 0
    failed: int = 0


def _due_reminders(session_factory: SessionFactory, start: datetime, end: datetime):
    with session_factory() as session:
        rows = list(
            session.exec(
                select(Reminder, User.phone)
                .join(User, User.id == Reminder.user_id)
                .where(Reminder.status != REMINDER_SENT)
                .where(Reminder.notification_sent == False)  # noqa: E712
                .where(Reminder.date >= start)
                .where(Reminder.date <= end)
            ).all()
        )
        session.expunge_all()
    return [
        Notification(
            user_id=reminder.user_id,
            kind="reminder",
            record_id=reminder.id,
            title=reminder.name or reminder.description,
            due_at=reminder.date,
            amount=reminder.amount,
            phone=reminder.phone or user_phone,
        )
        for reminder, user_phone in rows
    ]


def _due_transactions(session_factory: SessionFactory, start: datetime, end: datetime):
    with session_factory() as session:
        rows = list(
            session.exec(
                select(Transaction, User.phone)
                .join(User, User.id == Transaction.user_id)
                .where(Transaction.formato == FORMATO_SCHEDULE)
                .where(Transaction.status == STATUS_PENDING)
                .where(Transaction.notification_sent == False)  # noqa: E712
                .where(Transaction.date >= start)
                .where(Transaction.date <= end)
            ).all()
        )
        session.expunge_all()
    return [
        Notification(
            user_id=txn.user_id,
            kind="transaction",
            record_id=txn.id,
            title=txn.description,
            due_at=txn.date,
            amount=txn.amount,
            phone=txn.creator_phone or user_phone,
        )
        for txn, user_phone in rows
    ]


def _flag_sent(session_factory: SessionFactory, notification: Notification, now: datetime) -> None:
    with session_factory() as session:
        if notification.kind == "reminder":
            statement = (
                update(Reminder)
                .where(Reminder.id == notification.record_id)
                .values(status=REMINDER_SENT, notification_sent=True, last_notification_at=now)
            )
        else:
            statement = (
                update(Transaction)
                .where(Transaction.id == notification.record_id)
                .values(notification_sent=True)
            )
        session.execute(statement.execution_options(synchronize_session=False))


def dispatch_due(
    session_factory: SessionFactory,
    notifier: Notifier,
    *,
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_WINDOW,
) -> SweepResult:
    """Notify every reminder and pending scheduled row due within ``now ± window``.

    A failing item is logged and left unflagged so the next sweep retries it.
    """

    now = now or datetime.now()
    start, end = now - window, now + window
    result = SweepResult()
    due = _due_reminders(session_factory, start, end) + _due_transactions(
        session_factory, start, end
    )
    for notification in due:
        try:
            notifier.send(notification)
            _flag_sent(session_factory, notification, now)
        except Exception:
            result.failed += 1
            logger.exception(
                "Notification failed",
                extra={"kind": notification.kind, "record_id": notification.record_id},
            )
        else:
            result.sent += 1
    logger.info(
        "Notification dispatch finished",
        extra={"sent": result.sent, "failed": result.failed, "window_minutes":
               int(window.total_seconds() // 60)},
    )
    return result


def run_sweep(
    session_factory: SessionFactory,
    notifier: Notifier,
    *,
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_WINDOW,
) -> SweepResult:
    """Dispatch due notifications, then mark what is past due as overdue."""

    now = now or datetime.now()
    result = dispatch_due(session_factory, notifier, now=now, window=window)
    result.overdue = mark_overdue(session_factory, now=now)
    return result
