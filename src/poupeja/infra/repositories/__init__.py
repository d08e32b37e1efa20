"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .category import SQLModelCategoryRepository
from .dependent import SQLModelDependentRepository
from .goal import SQLModelGoalRepository
from .note import SQLModelNoteRepository
from .reminder import SQLModelReminderRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelCategoryRepository",
    "SQLModelDependentRepository",
    "SQLModelGoalRepository",
    "SQLModelNoteRepository",
    "SQLModelReminderRepository",
    "SQLModelTransactionRepository",
]
