"""Transaction form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

from ...services.transactions import LEDGER_TYPES
from ..common import parse_datetime


@dataclass(slots=True)
class TransactionForm:
    """Represents ledger entry input prior to validation."""

    type: str = "expense"
    amount: float | None = None
    description: str = ""
    date: datetime | None = None
    category: Union[int, str, None] = None
    account_id: Optional[int] = None
    goal_id: Optional[int] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionForm:
        """Create a form populated from request data."""

        form = cls()
        form.raw_data = dict(data)
        return form

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()
        raw = self.raw_data

        self.type = str(raw.get("type") or "expense").strip().lower()
        if self.type not in LEDGER_TYPES:
            self._add_error("type", "Type must be income or expense.")

        date_raw = str(raw.get("date") or "").strip()
        self.date = None
        if not date_raw:
            self._add_error("date", "Date is required.")
        else:
            try:
                self.date = parse_datetime(date_raw, "date")
            except ValueError:
                self._add_error("date", "Enter a valid date (YYYY-MM-DD).")

        amount_raw = raw.get("amount")
        self.amount = None
        if amount_raw in (None, ""):
            self._add_error("amount", "Amount is required.")
        else:
            try:
                parsed_amount = float(amount_raw)
            except (TypeError, ValueError):
                self._add_error("amount", "Enter a valid number for the amount.")
            else:
                if parsed_amount == 0:
                    self._add_error("amount", "Amount cannot be zero.")
                else:
                    self.amount = parsed_amount

        self.description = str(raw.get("description") or "").strip()
        if not self.description:
            self._add_error("description", "Description is required.")
        elif len(self.description) > 255:
            self._add_error("description", "Description must be 255 characters or fewer.")

        self.category = raw.get("category", raw.get("category_id"))
        self.account_id = self._optional_id("account_id")
        self.goal_id = self._optional_id("goal_id")
        return not self.errors

    def _optional_id(self, key: str) -> Optional[int]:
        value = self.raw_data.get(key)
        if value in (None, ""):
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            self._add_error(key, "Must be a whole number.")
            return None
        if parsed <= 0:
            self._add_error(key, "Must be greater than zero if provided.")
            return None
        return parsed

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)
