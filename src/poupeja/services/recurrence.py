"""Recurrence labels and next-occurrence date arithmetic."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Optional, TypeVar

ONCE = "once"
DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"
INSTALLMENTS = "installments"

RECURRENCES = (ONCE, DAILY, WEEKLY, MONTHLY, YEARLY)

# Labels as entered through the Portuguese UI and stored by older rows.
_LABELS = {
    "uma vez": ONCE,
    "diário": DAILY,
    "diario": DAILY,
    "semanal": WEEKLY,
    "mensal": MONTHLY,
    "anual": YEARLY,
    "parcelado": INSTALLMENTS,
    "parcelas": INSTALLMENTS,
}

PORTUGUESE_LABELS = {
    ONCE: "Uma vez",
    DAILY: "Diário",
    WEEKLY: "Semanal",
    MONTHLY: "Mensal",
    YEARLY: "Anual",
    INSTALLMENTS: "Parcelado",
}

_D = TypeVar("_D", date, datetime)


def normalize_recurrence(value: Optional[str], *, allow_installments: bool = False) -> str:
    """Map an English or Portuguese label to a canonical recurrence.

    Empty and unknown labels mean ``once``. ``installments`` is only meaningful
    when creating a schedule and collapses to ``once`` elsewhere.
    """

    if not value:
        return ONCE
    key = value.strip().lower()
    if key in RECURRENCES:
        result = key
    elif key == INSTALLMENTS:
        result = INSTALLMENTS
    else:
        result = _LABELS.get(key, ONCE)
    if result == INSTALLMENTS and not allow_installments:
        return ONCE
    return result


def add_months(value: _D, months: int) -> _D:
    """Shift by whole calendar months, clamping the day to the target month's end."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_occurrence(value: _D, recurrence: Optional[str]) -> Optional[_D]:
    """Return the date of the next occurrence, or None for one-off rows.

    Jan 31 monthly becomes the last day of February; Feb 29 yearly becomes
    Feb 28. Time of day is preserved.
    """

    kind = normalize_recurrence(recurrence)
    if kind == DAILY:
        return value + timedelta(days=1)
    if kind == WEEKLY:
        return value + timedelta(days=7)
    if kind == MONTHLY:
        return add_months(value, 1)
    if kind == YEARLY:
        return add_months(value, 12)
    return None


def recurrence_label(value: Optional[str]) -> str:
    """Human-readable Portuguese label for a stored recurrence."""

    return PORTUGUESE_LABELS[normalize_recurrence(value, allow_installments=True)]
