"""Note repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.note import Note


class NoteRepository(Protocol):
    """Repository for managing note entities."""

    def get_by_id(self, note_id: int, *, user_id: int) -> Optional[Note]:
        """Retrieve a note by ID."""
        ...

    def list_all(self, *, user_id: int, text: Optional[str] = None) -> list[Note]:
        """List the user's note rows."""
        ...

    def create(self, note: Note, *, user_id: int) -> Note:
        """Create a new note."""
        ...

    def update(self, note: Note, *, user_id: int) -> Note:
        """Update an existing note."""
        ...

    def delete(self, note_id: int, *, user_id: int) -> bool:
        """Delete a note; False when nothing matched."""
        ...
