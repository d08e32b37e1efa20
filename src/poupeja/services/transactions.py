"""Ledger transactions: persistence with goal upkeep, filtering and summaries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from sqlalchemy import or_
from sqlmodel import Session, select

from ..domain.repositories import TransactionRepository
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import Account
from ..models.category import Category
from ..models.goal import Goal
from ..models.transaction import (
    FORMATO_TRANSACTION,
    OPEN_STATUSES,
    REMINDER_TYPES,
    TRANSACTION_TYPES,
    Transaction,
)
from .categories import resolve_category_id
from .goals import apply_goal_delta, goal_contribution
from .reference_codes import next_reference_code

logger = get_logger(__name__)

LEDGER_TYPES = ("income", "expense")
DELETE_SCOPES = ("single", "series")


@dataclass
class LedgerFilters:
    """Filters applied to ledger listings."""

    user_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    text: Optional[str] = None
    txn_type: str = "all"  # income | expense | all


@dataclass
class Pagination:
    """Simple pagination parameters."""

    page: int = 1
    per_page: int = 25


def signed_amount(amount: float, txn_type: str) -> float:
    """Expenses are stored negative, everything else positive."""

    try:
        value = abs(float(amount))
    except (TypeError, ValueError):
        raise ValueError("Amount must be a number") from None
    return -value if txn_type == "expense" else value


def check_links(
    session: Session,
    *,
    user_id: int,
    account_id: Optional[int] = None,
    goal_id: Optional[int] = None,
    txn_type: Optional[str] = None,
) -> None:
    """Reject account or goal references the user cannot see.

    Income may only be linked to income goals; limits measure spend instead.
    """

    if account_id is not None:
        account = session.exec(
            select(Account)
            .where(Account.id == account_id)
            .where(or_(Account.user_id == user_id, Account.user_id.is_(None)))  # type: ignore
        ).first()
        if account is None:
            raise ValueError(f"Unknown account: {account_id}")
    if goal_id is not None:
        goal = session.exec(
            select(Goal).where(Goal.id == goal_id).where(Goal.user_id == user_id)
        ).first()
        if goal is None:
            raise ValueError(f"Unknown goal: {goal_id}")
        if txn_type == "income" and goal.type != "income":
            raise ValueError("Income cannot be linked to a spending limit")


def _add_contribution(session: Session, txn: Transaction, sign: int = 1) -> None:
    contribution = goal_contribution(txn)
    if contribution:
        goal_id, amount = contribution
        apply_goal_delta(session, goal_id, sign * amount)


def create_transaction(
    session_factory: SessionFactory,
    *,
    user_id: int,
    txn_type: str,
    amount: float,
    description: str,
    date: datetime,
    category: Union[int, str, None] = None,
    account_id: Optional[int] = None,
    goal_id: Optional[int] = None,
    creator_name: Optional[str] = None,
    creator_phone: Optional[str] = None,
) -> Transaction:
    """Record a ledger transaction and credit its goal in one database transaction."""

    if txn_type not in LEDGER_TYPES:
        raise ValueError(f"Invalid transaction type: {txn_type}")
    value = signed_amount(amount, txn_type)
    if value == 0:
        raise ValueError("Amount must be different from zero")
    if date is None:
        raise ValueError("Transaction date is required")

    with session_factory() as session:
        check_links(session, user_id=user_id, account_id=account_id, goal_id=goal_id,
                    txn_type=txn_type)
        code = str(next_reference_code(session))
        txn = Transaction(
            user_id=user_id,
            type=txn_type,
            amount=value,
            description=(description or "").strip(),
            date=date,
            category_id=resolve_category_id(
                session, user_id=user_id, transaction_type=txn_type, category=category
            ),
            account_id=account_id,
            goal_id=goal_id,
            reference_code=code,
            series_code=code,
            formato=FORMATO_TRANSACTION,
            creator_name=creator_name,
            creator_phone=creator_phone,
        )
        session.add(txn)
        session.flush()
        _add_contribution(session, txn)
        session.refresh(txn)
        session.expunge(txn)

    logger.info(
        "Transaction created",
        extra={"user_id": user_id, "transaction_id": txn.id, "reference_code": code},
    )
    return txn


_EDITABLE = {"type", "amount", "description", "date", "category", "account_id", "goal_id",
             "recurrence", "situacao", "creator_name", "creator_phone"}


def update_transaction(
    session_factory: SessionFactory,
    *,
    user_id: int,
    transaction_id: int,
    **changes,
) -> Optional[Transaction]:
    """Edit a transaction; the goal contribution is moved and a new code assigned."""

    unknown = set(changes) - _EDITABLE
    if unknown:
        raise ValueError(f"Cannot update transaction fields: {', '.join(sorted(unknown))}")

    with session_factory() as session:
        txn = session.exec(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.user_id == user_id)
        ).first()
        if txn is None:
            return None

        _add_contribution(session, txn, sign=-1)

        txn_type = changes.get("type", txn.type)
        if txn_type not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid transaction type: {txn_type}")
        if "amount" in changes or "type" in changes:
            raw = changes.get("amount", txn.amount)
            value = signed_amount(raw, txn_type)
            if value == 0 and txn_type not in REMINDER_TYPES:
                raise ValueError("Amount must be different from zero")
            txn.amount = value
        txn.type = txn_type
        if "category" in changes or "type" in changes:
            txn.category_id = resolve_category_id(
                session,
                user_id=user_id,
                transaction_type=txn_type,
                category=changes.get("category", txn.category_id),
            )
        check_links(
            session,
            user_id=user_id,
            account_id=changes.get("account_id"),
            goal_id=changes.get("goal_id", txn.goal_id),
            txn_type=txn_type,
        )
        for key in ("description", "date", "account_id", "goal_id", "recurrence",
                    "situacao", "creator_name", "creator_phone"):
            if key in changes:
                setattr(txn, key, changes[key])
        if txn.date is None:
            raise ValueError("Transaction date is required")

        txn.reference_code = str(next_reference_code(session))
        txn.updated_at = datetime.now(timezone.utc)
        session.add(txn)
        session.flush()
        _add_contribution(session, txn)
        session.refresh(txn)
        session.expunge(txn)

    logger.info("Transaction updated", extra={"user_id": user_id, "transaction_id": txn.id})
    return txn


def delete_transaction(
    session_factory: SessionFactory,
    *,
    user_id: int,
    transaction_id: int,
    scope: str = "single",
) -> int:
    """Delete one row or its whole series; returns the number of rows removed."""

    if scope not in DELETE_SCOPES:
        raise ValueError(f"Invalid delete scope: {scope}")

    with session_factory() as session:
        txn = session.exec(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.user_id == user_id)
        ).first()
        if txn is None:
            return 0
        rows = [txn]
        if scope == "series" and txn.series_code:
            rows = list(
                session.exec(
                    select(Transaction)
                    .where(Transaction.user_id == user_id)
                    .where(Transaction.series_code == txn.series_code)
                ).all()
            )
        for row in rows:
            _add_contribution(session, row, sign=-1)
            session.delete(row)

    logger.info(
        "Transactions deleted",
        extra={"user_id": user_id, "transaction_id": transaction_id, "scope": scope,
               "count": len(rows)},
    )
    return len(rows)


def filtered_transactions(repo: TransactionRepository, filters: LedgerFilters) -> list[Transaction]:
    """Fetch transactions matching the supplied filters, newest first."""

    types = None
    if filters.txn_type in TRANSACTION_TYPES:
        types = [filters.txn_type]
    elif filters.txn_type not in ("all", "", None):
        raise ValueError(f"Invalid transaction type filter: {filters.txn_type}")
    return repo.search(
        user_id=filters.user_id,
        start_date=filters.start_date,
        end_date=filters.end_date,
        types=types,
        category_id=filters.category_id,
        account_id=filters.account_id,
        text=filters.text,
    )


def paginate_transactions(
    txs: list[Transaction], pagination: Pagination
) -> tuple[list[Transaction], int]:
    """Return the current page of transactions and total count."""

    total = len(txs)
    page = max(1, pagination.page)
    per_page = max(1, pagination.per_page)
    start = (page - 1) * per_page
    end = start + per_page
    return txs[start:end], total


def compute_summary(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Income, expenses and balance over income/expense rows."""

    rows = [t for t in transactions if t.type in LEDGER_TYPES]
    income = sum(t.amount for t in rows if t.type == "income")
    expenses = sum(abs(t.amount) for t in rows if t.type == "expense")
    return {
        "income": round(income, 2),
        "expenses": round(expenses, 2),
        "balance": round(income - expenses, 2),
    }


def compute_spending_by_category(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> list[dict[str, object]]:
    """Roll up expense totals by category id, largest first."""

    lookup = {c.id: c for c in categories if c.id is not None}
    totals: dict[Optional[int], float] = {}
    for tx in transactions:
        if tx.type != "expense":
            continue
        totals[tx.category_id] = totals.get(tx.category_id, 0.0) + abs(tx.amount)

    grand_total = sum(totals.values())
    breakdown: list[dict[str, object]] = []
    for cat_id, total in totals.items():
        category = lookup.get(cat_id)
        breakdown.append(
            {
                "category_id": cat_id,
                "name": category.name if category else "Sem categoria",
                "color": category.color if category else "#607D8B",
                "amount": round(total, 2),
                "share": round(total / grand_total * 100, 1) if grand_total else 0.0,
            }
        )
    breakdown.sort(key=lambda entry: entry["amount"], reverse=True)
    return breakdown


def upcoming_scheduled(
    repo: TransactionRepository,
    *,
    user_id: int,
    days: int = 7,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """Open scheduled expenses due between now and ``days`` ahead."""

    if days < 0:
        raise ValueError("Days must not be negative")
    now = now or datetime.now()
    horizon = now + timedelta(days=days)
    return [
        txn
        for txn in repo.list_scheduled(user_id=user_id, statuses=OPEN_STATUSES)
        if txn.type == "expense" and now <= txn.date <= horizon
    ]


def transaction_to_dict(txn: Transaction) -> dict[str, object]:
    """JSON-friendly representation used by the API."""

    return {
        "id": txn.id,
        "type": txn.type,
        "amount": txn.amount,
        "description": txn.description,
        "date": txn.date.isoformat() if txn.date else None,
        "category_id": txn.category_id,
        "account_id": txn.account_id,
        "goal_id": txn.goal_id,
        "recurrence": txn.recurrence,
        "status": txn.status,
        "reference_code": txn.reference_code,
        "series_code": txn.series_code,
        "installment_number": txn.installment_number,
        "formato": txn.formato,
        "situacao": txn.situacao,
        "creator_name": txn.creator_name,
        "creator_phone": txn.creator_phone,
    }
