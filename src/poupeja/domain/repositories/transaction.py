"""Transaction repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Read access to transaction rows; multi-row writes go through services."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def list_all(self, *, user_id: int, limit: int = 100, offset: int = 0) -> list[Transaction]:
        """List all transactions with pagination."""
        ...

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
        """Advanced search with multiple filters."""
        ...

    def list_scheduled(
        self, *, user_id: int, statuses: Optional[Sequence[str]] = None
    ) -> list[Transaction]:
        """List scheduled rows."""
        ...

    def list_series(self, series_code: str, *, user_id: int) -> list[Transaction]:
        """List the rows of one installment plan or recurrence chain."""
        ...

    def balances_by_account(self, *, user_id: int) -> list[tuple[int, float]]:
        """Signed totals per account."""
        ...
