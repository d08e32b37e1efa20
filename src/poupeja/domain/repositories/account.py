"""Account repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for managing account entities."""

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        ...

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by name."""
        ...

    def name_taken(self, name: str, *, user_id: int, exclude_id: Optional[int] = None) -> bool:
        """Return True when the user already owns an account with this name."""
        ...

    def list_all(self, *, user_id: int) -> list[Account]:
        """List the user's account rows."""
        ...

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account."""
        ...

    def update(self, account: Account, *, user_id: int) -> Account:
        """Update an existing account."""
        ...

    def delete(self, account_id: int, *, user_id: int) -> bool:
        """Delete a account; False when nothing matched."""
        ...
