"""Dependent repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.dependent import Dependent


class DependentRepository(Protocol):
    """Repository for managing dependent entities."""

    def get_by_id(self, dep_id: int, *, user_id: int) -> Optional[Dependent]:
        """Retrieve a dependent by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Dependent]:
        """List the user's dependent rows."""
        ...

    def create(self, dependent: Dependent, *, user_id: int) -> Dependent:
        """Create a new dependent."""
        ...

    def update(self, dependent: Dependent, *, user_id: int) -> Dependent:
        """Update an existing dependent."""
        ...

    def delete(self, dep_id: int, *, user_id: int) -> bool:
        """Delete a dependent; False when nothing matched."""
        ...
