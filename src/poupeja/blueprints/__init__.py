"""Blueprint exports."""

from . import (
    accounts,
    auth,
    categories,
    dependents,
    goals,
    notes,
    reminders,
    schedule,
    subscription,
    transactions,
)

__all__ = [
    "accounts",
    "auth",
    "categories",
    "dependents",
    "goals",
    "notes",
    "reminders",
    "schedule",
    "subscription",
    "transactions",
]
