"""Scheduled transaction form validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ...models.transaction import REMINDER_TYPES, SITUACAO_ACTIVE, TRANSACTION_TYPES
from ...services.recurrence import INSTALLMENTS, normalize_recurrence
from ...services.scheduling import MAX_INSTALLMENTS, SITUACOES, ScheduledTransactionInput
from ..common import parse_datetime


@dataclass(slots=True)
class ScheduledTransactionForm:
    """Represents schedule input prior to validation."""

    raw_data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    cleaned: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ScheduledTransactionForm:
        return cls(raw_data=dict(data))

    def validate(self) -> bool:
        self.errors.clear()
        self.cleaned.clear()
        raw = self.raw_data

        txn_type = str(raw.get("type") or "expense").strip().lower()
        if txn_type not in TRANSACTION_TYPES:
            self._add_error("type", f"Type must be one of: {', '.join(TRANSACTION_TYPES)}.")
        self.cleaned["type"] = txn_type

        description = str(raw.get("description") or "").strip()
        if not description:
            self._add_error("description", "Description is required.")
        elif len(description) > 240:
            self._add_error("description", "Description must be 240 characters or fewer.")
        self.cleaned["description"] = description

        amount_raw = raw.get("amount")
        amount: Optional[float] = None
        if amount_raw in (None, ""):
            if txn_type not in REMINDER_TYPES:
                self._add_error("amount", "Amount is required.")
        else:
            try:
                amount = float(amount_raw)
            except (TypeError, ValueError):
                self._add_error("amount", "Enter a valid number for the amount.")
            else:
                if amount == 0 and txn_type not in REMINDER_TYPES:
                    self._add_error("amount", "Amount cannot be zero.")
        self.cleaned["amount"] = amount

        date_raw = str(raw.get("date") or "").strip()
        scheduled: Optional[datetime] = None
        if not date_raw:
            self._add_error("date", "Scheduled date is required.")
        else:
            try:
                scheduled = parse_datetime(date_raw, "date")
            except ValueError:
                self._add_error("date", "Enter a valid date (YYYY-MM-DD or ISO-8601).")
        self.cleaned["date"] = scheduled

        recurrence = normalize_recurrence(raw.get("recurrence"), allow_installments=True)
        self.cleaned["recurrence"] = recurrence
        installments: Optional[int] = None
        if recurrence == INSTALLMENTS:
            try:
                installments = int(raw.get("installments") or 0)
            except (TypeError, ValueError):
                self._add_error("installments", "Installments must be a whole number.")
            else:
                if installments < 1 or installments > MAX_INSTALLMENTS:
                    self._add_error(
                        "installments", f"Installments must be between 1 and {MAX_INSTALLMENTS}."
                    )
        self.cleaned["installments"] = installments

        situacao = str(raw.get("situacao") or SITUACAO_ACTIVE).strip().lower()
        if situacao not in SITUACOES:
            self._add_error("situacao", f"Situacao must be one of: {', '.join(SITUACOES)}.")
        self.cleaned["situacao"] = situacao

        for key in ("account_id", "goal_id"):
            self.cleaned[key] = self._optional_id(key)
        self.cleaned["category"] = raw.get("category", raw.get("category_id"))
        self.cleaned["creator_name"] = raw.get("creator_name")
        self.cleaned["creator_phone"] = raw.get("creator_phone")
        return not self.errors

    def to_input(self, user_id: int) -> ScheduledTransactionInput:
        """Build the service input from a validated form."""

        return ScheduledTransactionInput(user_id=user_id, **self.cleaned)

    def _optional_id(self, key: str) -> Optional[int]:
        value = self.raw_data.get(key)
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            self._add_error(key, "Must be a whole number.")
            return None

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
