"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, update
from sqlmodel import select

from ...models.category import Category
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category owned by the user or shared by default."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category)
                .where(Category.id == category_id)
                .where(or_(Category.user_id == user_id, Category.user_id.is_(None)))  # type: ignore
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, category_type: str, *, user_id: int) -> Optional[Category]:
        """Case-insensitive lookup by name within a type, own categories first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(Category)
                .where(func.lower(Category.name) == name.strip().lower())
                .where(Category.type == category_type)
                .where(or_(Category.user_id == user_id, Category.user_id.is_(None)))  # type: ignore
            ).all()
            session.expunge_all()
        rows = sorted(rows, key=lambda c: c.user_id is None)
        return rows[0] if rows else None

    def name_taken(self, name: str, *, user_id: int, exclude_id: Optional[int] = None) -> bool:
        """Return True when the user already owns a category with this name."""
        with self.session_factory() as session:
            statement = (
                select(Category.id)
                .where(Category.user_id == user_id)
                .where(func.lower(Category.name) == name.strip().lower())
            )
            if exclude_id is not None:
                statement = statement.where(Category.id != exclude_id)
            return session.exec(statement).first() is not None

    def list_all(self, *, user_id: int, category_type: Optional[str] = None) -> list[Category]:
        """List the user's categories plus shared defaults."""
        with self.session_factory() as session:
            statement = select(Category).where(
                or_(Category.user_id == user_id, Category.user_id.is_(None))  # type: ignore
            )
            if category_type:
                statement = statement.where(Category.type == category_type)
            statement = statement.order_by(Category.name)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update an existing category."""
        with self.session_factory() as session:
            category.user_id = user_id
            category = session.merge(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category owned by the user. Shared defaults are never deleted."""
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category is None:
                return False
            session.execute(
                update(Transaction)
                .where(Transaction.category_id == category_id)
                .values(category_id=None)
            )
            session.delete(category)
            session.commit()
            return True
