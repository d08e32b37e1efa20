"""SQLModel implementation of Goal repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import update
from sqlmodel import select

from ...models.goal import Goal
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelGoalRepository:
    """SQLModel-based goal/limit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, goal_id: int, *, user_id: int) -> Optional[Goal]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, goal_type: Optional[str] = None) -> list[Goal]:
        with self.session_factory() as session:
            statement = select(Goal).where(Goal.user_id == user_id)
            if goal_type:
                statement = statement.where(Goal.type == goal_type)
            statement = statement.order_by(Goal.created_at)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, goal: Goal, *, user_id: int) -> Goal:
        with self.session_factory() as session:
            goal.user_id = user_id
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def update(self, goal: Goal, *, user_id: int) -> Goal:
        with self.session_factory() as session:
            goal.user_id = user_id
            goal = session.merge(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def delete(self, goal_id: int, *, user_id: int) -> bool:
        """Delete a goal and unlink the transactions that referenced it."""
        with self.session_factory() as session:
            goal = session.exec(
                select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
            ).first()
            if goal is None:
                return False
            session.execute(
                update(Transaction).where(Transaction.goal_id == goal_id).values(goal_id=None)
            )
            session.delete(goal)
            session.commit()
            return True
