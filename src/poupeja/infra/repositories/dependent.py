"""SQLModel implementation of Dependent repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.dependent import Dependent
from ..database import SessionFactory


class SQLModelDependentRepository:
    """SQLModel-based dependent repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, dep_id: int, *, user_id: int) -> Optional[Dependent]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Dependent).where(Dependent.dep_id == dep_id, Dependent.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Dependent]:
        """List dependents ordered by their sequence number."""
        with self.session_factory() as session:
            statement = (
                select(Dependent)
                .where(Dependent.user_id == user_id)
                .order_by(Dependent.dep_numero)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, dependent: Dependent, *, user_id: int) -> Dependent:
        """Insert a dependent numbered after the owner's highest ``dep_numero``."""
        with self.session_factory() as session:
            highest = session.exec(
                select(func.max(Dependent.dep_numero)).where(Dependent.user_id == user_id)
            ).one()
            dependent.user_id = user_id
            dependent.dep_numero = (highest or 0) + 1
            session.add(dependent)
            session.commit()
            session.refresh(dependent)
            session.expunge(dependent)
            return dependent

    def update(self, dependent: Dependent, *, user_id: int) -> Dependent:
        with self.session_factory() as session:
            dependent.user_id = user_id
            dependent = session.merge(dependent)
            session.commit()
            session.refresh(dependent)
            session.expunge(dependent)
            return dependent

    def delete(self, dep_id: int, *, user_id: int) -> bool:
        with self.session_factory() as session:
            dependent = session.exec(
                select(Dependent).where(Dependent.dep_id == dep_id, Dependent.user_id == user_id)
            ).first()
            if dependent is None:
                return False
            session.delete(dependent)
            session.commit()
            return True
