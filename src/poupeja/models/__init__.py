"""SQLModel table exports."""

from .account import Account
from .category import Category
from .dependent import Dependent
from .goal import Goal
from .note import Note
from .reference_sequence import ReferenceCodeSequence
from .reminder import Reminder
from .subscription import Subscription
from .transaction import Transaction
from .user import User

__all__ = [
    "Account",
    "Category",
    "Dependent",
    "Goal",
    "Note",
    "ReferenceCodeSequence",
    "Reminder",
    "Subscription",
    "Transaction",
    "User",
]
