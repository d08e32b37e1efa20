"""Financial notes (notas)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from ..domain.repositories import NoteRepository
from ..models.note import Note


def create_note(
    repo: NoteRepository,
    *,
    user_id: int,
    data: date,
    descricao: str,
    notas: str = "",
) -> Note:
    if data is None:
        raise ValueError("Note date is required")
    descricao = (descricao or "").strip()
    if not descricao:
        raise ValueError("Note description is required")
    return repo.create(Note(data=data, descricao=descricao, notas=notas or ""), user_id=user_id)


def update_note(
    repo: NoteRepository,
    *,
    user_id: int,
    note_id: int,
    data: Optional[date] = None,
    descricao: Optional[str] = None,
    notas: Optional[str] = None,
) -> Optional[Note]:
    note = repo.get_by_id(note_id, user_id=user_id)
    if note is None:
        return None
    if data is not None:
        note.data = data
    if descricao is not None:
        if not descricao.strip():
            raise ValueError("Note description is required")
        note.descricao = descricao.strip()
    if notas is not None:
        note.notas = notas
    note.updated_at = datetime.now(timezone.utc)
    return repo.update(note, user_id=user_id)


def note_to_dict(note: Note) -> dict[str, object]:
    return {
        "id": note.id,
        "data": note.data.isoformat(),
        "descricao": note.descricao,
        "notas": note.notas,
        "created_at": note.created_at.isoformat() if note.created_at else None,
    }
