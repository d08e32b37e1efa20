"""Service module exports."""

from . import (
    accounts,
    auth,
    balances,
    categories,
    dependents,
    goals,
    notes,
    notifications,
    recurrence,
    reference_codes,
    reminders,
    scheduling,
    subscriptions,
    transactions,
)

__all__ = [
    "accounts",
    "auth",
    "balances",
    "categories",
    "dependents",
    "goals",
    "notes",
    "notifications",
    "recurrence",
    "reference_codes",
    "reminders",
    "scheduling",
    "subscriptions",
    "transactions",
]
