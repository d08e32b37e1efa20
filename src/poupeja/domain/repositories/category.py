"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def get_by_name(self, name: str, category_type: str, *, user_id: int) -> Optional[Category]:
        """Case-insensitive lookup by name within a type."""
        ...

    def name_taken(self, name: str, *, user_id: int, exclude_id: Optional[int] = None) -> bool:
        """Return True when the user already owns a category with this name."""
        ...

    def list_all(self, *, user_id: int, category_type: Optional[str] = None) -> list[Category]:
        """List the user's categories plus shared defaults."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        ...

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update an existing category."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> bool:
        """Delete a category; False when nothing matched."""
        ...
