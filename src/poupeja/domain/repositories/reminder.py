"""Reminder repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.reminder import Reminder


class ReminderRepository(Protocol):
    """Repository for managing reminder entities."""

    def get_by_id(self, reminder_id: int, *, user_id: int) -> Optional[Reminder]:
        """Retrieve a reminder by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Reminder]:
        """List the user's reminder rows."""
        ...

    def list_by_codigo(self, codigo_trans: str, *, user_id: int) -> list[Reminder]:
        """List reminders sharing a transaction code."""
        ...

    def create(self, reminder: Reminder, *, user_id: int) -> Reminder:
        """Create a new reminder."""
        ...

    def update(self, reminder: Reminder, *, user_id: int) -> Reminder:
        """Update an existing reminder."""
        ...

    def delete(self, reminder_id: int, *, user_id: int) -> bool:
        """Delete a reminder; False when nothing matched."""
        ...
