"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import func, or_
from sqlmodel import select

from ...models.transaction import FORMATO_SCHEDULE, Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, limit: int = 100, offset: int = 0) -> list[Transaction]:
        """List all transactions, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .order_by(Transaction.date.desc())  # type: ignore
                .offset(offset)
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def search(
        self,
        *,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        types: Optional[Sequence[str]] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        goal_id: Optional[int] = None,
        formato: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
        text: Optional[str] = None,
    ) -> list[Transaction]:
        """Advanced search with multiple filters; ``end_date`` is inclusive."""
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)

            if start_date:
                statement = statement.where(Transaction.date >= start_date)
            if end_date:
                statement = statement.where(Transaction.date <= end_date)
            if types:
                statement = statement.where(Transaction.type.in_(list(types)))  # type: ignore
            if category_id:
                statement = statement.where(Transaction.category_id == category_id)
            if account_id:
                statement = statement.where(Transaction.account_id == account_id)
            if goal_id:
                statement = statement.where(Transaction.goal_id == goal_id)
            if formato:
                statement = statement.where(Transaction.formato == formato)
            if statuses:
                statement = statement.where(Transaction.status.in_(list(statuses)))  # type: ignore
            if text:
                pattern = f"%{text.strip().lower()}%"
                statement = statement.where(
                    or_(
                        func.lower(Transaction.description).like(pattern),
                        func.lower(func.coalesce(Transaction.reference_code, "")).like(pattern),
                    )
                )

            statement = statement.order_by(Transaction.date.desc())  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_scheduled(
        self, *, user_id: int, statuses: Optional[Sequence[str]] = None
    ) -> list[Transaction]:
        """Scheduled rows (formato=agenda, non-zero amount), soonest first."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.formato == FORMATO_SCHEDULE)
                .where(Transaction.amount != 0)
            )
            if statuses:
                statement = statement.where(Transaction.status.in_(list(statuses)))  # type: ignore
            statement = statement.order_by(Transaction.date)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_series(self, series_code: str, *, user_id: int) -> list[Transaction]:
        """Every row sharing a series code, in date order."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.series_code == series_code)
                .order_by(Transaction.date, Transaction.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def balances_by_account(self, *, user_id: int) -> list[tuple[int, float]]:
        """Return (account_id, signed total) pairs for rows linked to an account."""
        with self.session_factory() as session:
            statement = (
                select(Transaction.account_id, func.sum(Transaction.amount))
                .where(Transaction.user_id == user_id)
                .where(Transaction.account_id.is_not(None))  # type: ignore
                .group_by(Transaction.account_id)
            )
            return [
                (int(account_id), float(total or 0.0))
                for account_id, total in session.exec(statement).all()
            ]
