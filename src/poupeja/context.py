"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCategoryRepository,
    SQLModelDependentRepository,
    SQLModelGoalRepository,
    SQLModelNoteRepository,
    SQLModelReminderRepository,
    SQLModelTransactionRepository,
)
from .services.notifications import LoggingNotifier, Notifier


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    # Configuration
    config: BaseConfig

    # Database
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    transaction_repo: SQLModelTransactionRepository
    account_repo: SQLModelAccountRepository
    category_repo: SQLModelCategoryRepository
    goal_repo: SQLModelGoalRepository
    dependent_repo: SQLModelDependentRepository
    note_repo: SQLModelNoteRepository
    reminder_repo: SQLModelReminderRepository

    notifier: Notifier = field(default_factory=LoggingNotifier)


def create_app_context(
    config: Optional[BaseConfig] = None, *, notifier: Optional[Notifier] = None
) -> AppContext:
    """Create the engine, initialize the schema and wire the repositories."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        transaction_repo=SQLModelTransactionRepository(session_factory),
        account_repo=SQLModelAccountRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        goal_repo=SQLModelGoalRepository(session_factory),
        dependent_repo=SQLModelDependentRepository(session_factory),
        note_repo=SQLModelNoteRepository(session_factory),
        reminder_repo=SQLModelReminderRepository(session_factory),
        notifier=notifier or LoggingNotifier(),
    )
