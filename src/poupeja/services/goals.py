"""Goal and spending-limit services.

Income goals accumulate the amounts of the income transactions linked to
them. The running ``current_amount`` is adjusted in the same database
transaction as every create/update/delete of such a transaction, through
:func:`apply_goal_delta`; :func:`recalculate_goal_amounts` rebuilds it from
scratch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from sqlalchemy import func, update
from sqlmodel import Session, select

from ..domain.repositories import GoalRepository, TransactionRepository
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.goal import GOAL_TYPES, Goal
from ..models.transaction import Transaction

logger = get_logger(__name__)

WARNING_THRESHOLD = 75.0
DANGER_THRESHOLD = 90.0


def goal_contribution(txn: Transaction) -> Optional[tuple[int, float]]:
    """(goal_id, amount) a transaction adds to its goal, or None."""

    if txn.type == "income" and txn.goal_id is not None:
        return txn.goal_id, float(txn.amount)
    return None


def apply_goal_delta(session: Session, goal_id: int, delta: float) -> None:
    """Shift a goal's current amount in place within the caller's transaction."""

    if not delta:
        return
    session.execute(
        update(Goal)
        .where(Goal.id == goal_id)
        .values(current_amount=Goal.current_amount + delta)
        .execution_options(synchronize_session=False)
    )


def recalculate_goal_amounts(session_factory: SessionFactory, *, user_id: int) -> list[Goal]:
    """Rebuild every goal's current amount from its linked income transactions."""

    with session_factory() as session:
        totals = dict(
            session.exec(
                select(Transaction.goal_id, func.sum(Transaction.amount))
                .where(Transaction.user_id == user_id)
                .where(Transaction.type == "income")
                .where(Transaction.goal_id.is_not(None))  # type: ignore
                .group_by(Transaction.goal_id)
            ).all()
        )
        goals = list(
            session.exec(
                select(Goal).where(Goal.user_id == user_id).where(Goal.type == "income")
            ).all()
        )
        for goal in goals:
            goal.current_amount = float(totals.get(goal.id) or 0.0)
            session.add(goal)
        session.flush()
        session.expunge_all()
    logger.info("Goal amounts recalculated", extra={"user_id": user_id, "goals": len(goals)})
    return goals


def _validate(*, name: str, target_amount: float, goal_type: str,
              start_date: Optional[date], end_date: Optional[date]) -> None:
    if not (name or "").strip():
        raise ValueError("Goal name is required")
    if target_amount is None or target_amount <= 0:
        raise ValueError("Target amount must be greater than zero")
    if goal_type not in GOAL_TYPES:
        raise ValueError(f"Invalid goal type: {goal_type}")
    if start_date and end_date and end_date < start_date:
        raise ValueError("End date cannot be before start date")


def create_goal(
    repo: GoalRepository,
    *,
    user_id: int,
    name: str,
    target_amount: float,
    goal_type: str = "income",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    deadline: Optional[date] = None,
    color: str = "#3B82F6",
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
) -> Goal:
    """Create a goal (income) or limit (expense); the amount starts at zero."""

    _validate(name=name, target_amount=target_amount, goal_type=goal_type,
              start_date=start_date, end_date=end_date)
    goal = Goal(
        name=name.strip(),
        target_amount=float(target_amount),
        current_amount=0.0,
        start_date=start_date,
        end_date=end_date,
        deadline=deadline,
        color=color,
        category_id=category_id,
        account_id=account_id,
        type=goal_type,
    )
    return repo.create(goal, user_id=user_id)


def update_goal(repo: GoalRepository, *, user_id: int, goal_id: int, **changes) -> Optional[Goal]:
    """Apply attribute changes; ``current_amount`` and ``type`` are not editable."""

    goal = repo.get_by_id(goal_id, user_id=user_id)
    if goal is None:
        return None
    editable = {"name", "target_amount", "start_date", "end_date", "deadline", "color",
                "category_id", "account_id"}
    unknown = set(changes) - editable
    if unknown:
        raise ValueError(f"Cannot update goal fields: {', '.join(sorted(unknown))}")
    for key, value in changes.items():
        setattr(goal, key, value)
    _validate(name=goal.name, target_amount=goal.target_amount, goal_type=goal.type,
              start_date=goal.start_date, end_date=goal.end_date)
    goal.name = goal.name.strip()
    goal.updated_at = datetime.now(timezone.utc)
    return repo.update(goal, user_id=user_id)


@dataclass(slots=True)
class GoalProgress:
    """Progress snapshot for a goal or limit."""

    goal_id: int
    name: str
    type: str
    target: float
    current: float

    @property
    def remaining(self) -> float:
        return round(self.target - self.current, 2)

    @property
    def percentage(self) -> float:
        if self.target <= 0:
            return 0.0
        return round(self.current / self.target * 100, 1)

    @property
    def level(self) -> str:
        pct = self.percentage
        if pct >= 100:
            return "exceeded" if self.type == "expense" else "reached"
        if self.type == "expense" and pct >= DANGER_THRESHOLD:
            return "danger"
        if self.type == "expense" and pct >= WARNING_THRESHOLD:
            return "warning"
        return "ok"

    def to_dict(self) -> dict:
        return {
            "goal_id": self.goal_id,
            "name": self.name,
            "type": self.type,
            "target": self.target,
            "current": self.current,
            "remaining": self.remaining,
            "percentage": self.percentage,
            "level": self.level,
        }


def limit_spend(goal: Goal, transactions: Iterable[Transaction]) -> float:
    """Expense total counted against a limit within its category and period."""

    start = datetime.combine(goal.start_date, time.min) if goal.start_date else None
    end = datetime.combine(goal.end_date, time.max) if goal.end_date else None
    total = 0.0
    for txn in transactions:
        if txn.type != "expense":
            continue
        if goal.category_id is not None and txn.category_id != goal.category_id:
            continue
        if goal.account_id is not None and txn.account_id != goal.account_id:
            continue
        if start and txn.date < start:
            continue
        if end and txn.date > end:
            continue
        total += abs(txn.amount)
    return round(total, 2)


def goal_progress(goal: Goal, transactions: Optional[TransactionRepository] = None) -> GoalProgress:
    """Compute progress; limits need a transaction repository to measure spend."""

    if goal.type == "expense":
        rows = (
            transactions.search(user_id=goal.user_id, types=["expense"]) if transactions else []
        )
        current = limit_spend(goal, rows)
    else:
        current = round(goal.current_amount, 2)
    return GoalProgress(
        goal_id=goal.id or 0,
        name=goal.name,
        type=goal.type,
        target=goal.target_amount,
        current=current,
    )
