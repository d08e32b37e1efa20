"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .category import CategoryRepository
from .dependent import DependentRepository
from .goal import GoalRepository
from .note import NoteRepository
from .reminder import ReminderRepository
from .transaction import TransactionRepository

__all__ = [
    "AccountRepository",
    "CategoryRepository",
    "DependentRepository",
    "GoalRepository",
    "NoteRepository",
    "ReminderRepository",
    "TransactionRepository",
]
