"""SQLModel implementation of Reminder (lembrete) repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.reminder import Reminder
from ..database import SessionFactory


class SQLModelReminderRepository:
    """SQLModel-based reminder repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, reminder_id: int, *, user_id: int) -> Optional[Reminder]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Reminder).where(Reminder.id == reminder_id, Reminder.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Reminder]:
        """List reminders ordered by date ascending."""
        with self.session_factory() as session:
            statement = (
                select(Reminder)
                .where(Reminder.user_id == user_id)
                .order_by(Reminder.date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_codigo(self, codigo_trans: str, *, user_id: int) -> list[Reminder]:
        with self.session_factory() as session:
            statement = (
                select(Reminder)
                .where(Reminder.user_id == user_id)
                .where(Reminder.codigo_trans == codigo_trans)
                .order_by(Reminder.date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, reminder: Reminder, *, user_id: int) -> Reminder:
        with self.session_factory() as session:
            reminder.user_id = user_id
            session.add(reminder)
            session.commit()
            session.refresh(reminder)
            session.expunge(reminder)
            return reminder

    def update(self, reminder: Reminder, *, user_id: int) -> Reminder:
        with self.session_factory() as session:
            reminder.user_id = user_id
            reminder = session.merge(reminder)
            session.commit()
            session.refresh(reminder)
            session.expunge(reminder)
            return reminder

    def delete(self, reminder_id: int, *, user_id: int) -> bool:
        with self.session_factory() as session:
            reminder = session.exec(
                select(Reminder).where(Reminder.id == reminder_id, Reminder.user_id == user_id)
            ).first()
            if reminder is None:
                return False
            session.delete(reminder)
            session.commit()
            return True
