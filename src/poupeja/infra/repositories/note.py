"""SQLModel implementation of Note repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_
from sqlmodel import select

from ...models.note import Note
from ..database import SessionFactory


class SQLModelNoteRepository:
    """SQLModel-based note repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, note_id: int, *, user_id: int) -> Optional[Note]:
        with self.session_factory() as session:
            obj = session.exec(select(Note).where(Note.id == note_id, Note.user_id == user_id)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, text: Optional[str] = None) -> list[Note]:
        """Newest first; ``text`` matches description or body case-insensitively."""
        with self.session_factory() as session:
            statement = select(Note).where(Note.user_id == user_id)
            if text:
                pattern = f"%{text.strip().lower()}%"
                statement = statement.where(
                    or_(
                        func.lower(Note.descricao).like(pattern),
                        func.lower(Note.notas).like(pattern),
                    )
                )
            statement = statement.order_by(Note.created_at.desc(), Note.id.desc())  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, note: Note, *, user_id: int) -> Note:
        with self.session_factory() as session:
            note.user_id = user_id
            session.add(note)
            session.commit()
            session.refresh(note)
            session.expunge(note)
            return note

    def update(self, note: Note, *, user_id: int) -> Note:
        with self.session_factory() as session:
            note.user_id = user_id
            note = session.merge(note)
            session.commit()
            session.refresh(note)
            session.expunge(note)
            return note

    def delete(self, note_id: int, *, user_id: int) -> bool:
        with self.session_factory() as session:
            note = session.exec(select(Note).where(Note.id == note_id, Note.user_id == user_id)).first()
            if note is None:
                return False
            session.delete(note)
            session.commit()
            return True
