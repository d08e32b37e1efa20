"""SQLModel implementation of Account repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, update
from sqlmodel import select

from ...models.account import Account
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelAccountRepository:
    """SQLModel-based account (conta) repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account owned by the user or shared by default."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Account)
                .where(Account.id == account_id)
                .where(or_(Account.user_id == user_id, Account.user_id.is_(None)))  # type: ignore
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by name (case-insensitive)."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Account)
                .where(func.lower(Account.name) == name.strip().lower())
                .where(or_(Account.user_id == user_id, Account.user_id.is_(None)))  # type: ignore
                .order_by(Account.user_id.is_(None))  # type: ignore
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def name_taken(self, name: str, *, user_id: int, exclude_id: Optional[int] = None) -> bool:
        with self.session_factory() as session:
            statement = (
                select(Account.id)
                .where(Account.user_id == user_id)
                .where(func.lower(Account.name) == name.strip().lower())
            )
            if exclude_id is not None:
                statement = statement.where(Account.id != exclude_id)
            return session.exec(statement).first() is not None

    def list_all(self, *, user_id: int) -> list[Account]:
        """List the user's accounts plus shared defaults, ordered by name."""
        with self.session_factory() as session:
            statement = (
                select(Account)
                .where(or_(Account.user_id == user_id, Account.user_id.is_(None)))  # type: ignore
                .order_by(Account.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account."""
        with self.session_factory() as session:
            account.user_id = user_id
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    def update(self, account: Account, *, user_id: int) -> Account:
        """Update an existing account."""
        with self.session_factory() as session:
            account.user_id = user_id
            account = session.merge(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    def delete(self, account_id: int, *, user_id: int) -> bool:
        """Delete an account owned by the user."""
        with self.session_factory() as session:
            account = session.exec(
                select(Account).where(Account.id == account_id, Account.user_id == user_id)
            ).first()
            if account is None:
                return False
            session.execute(
                update(Transaction)
                .where(Transaction.account_id == account_id)
                .values(account_id=None)
            )
            session.delete(account)
            session.commit()
            return True
