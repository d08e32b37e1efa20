"""Scheduled transactions ("agenda"): creation, installments and settlement.

A schedule is written as one or more ``formato == "agenda"`` rows. Installment
plans expand into one row per month sharing a base reference code; other
recurrences are a single row that spawns its successor when it is settled.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import update
from sqlmodel import Session, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.transaction import (
    FORMATO_SCHEDULE,
    OPEN_STATUSES,
    REMINDER_TYPES,
    SITUACAO_ACTIVE,
    SITUACAO_DONE,
    SITUACOES,
    STATUS_PAID,
    STATUS_PENDING,
    STATUS_RECEIVED,
    TRANSACTION_TYPES,
    Transaction,
)
from .categories import resolve_category_id
from .goals import apply_goal_delta, goal_contribution
from .recurrence import INSTALLMENTS, ONCE, add_months, next_occurrence, normalize_recurrence
from .reference_codes import installment_code, next_reference_code
from .transactions import check_links, signed_amount, update_transaction

logger = get_logger(__name__)

MAX_INSTALLMENTS = 120


@dataclass
class ScheduledTransactionInput:
    """Everything needed to write a schedule."""

    user_id: int
    description: str
    amount: float
    type: str
    date: datetime
    category: Union[int, str, None] = None
    recurrence: Optional[str] = ONCE
    installments: Optional[int] = None
    goal_id: Optional[int] = None
    account_id: Optional[int] = None
    situacao: str = SITUACAO_ACTIVE
    creator_name: Optional[str] = None
    creator_phone: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError on the first invalid field."""

        if self.type not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid transaction type: {self.type}")
        if not (self.description or "").strip():
            raise ValueError("Description is required")
        if self.date is None:
            raise ValueError("Scheduled date is required")
        if self.type not in REMINDER_TYPES:
            if self.amount is None:
                raise ValueError("Amount is required")
            if signed_amount(self.amount, self.type) == 0:
                raise ValueError("Amount must be different from zero")
        if self.situacao not in SITUACOES:
            raise ValueError(f"Invalid situacao: {self.situacao}")
        if self.is_installment_plan:
            if self.installments > MAX_INSTALLMENTS:
                raise ValueError(f"At most {MAX_INSTALLMENTS} installments are allowed")

    @property
    def recurrence_kind(self) -> str:
        return normalize_recurrence(self.recurrence, allow_installments=True)

    @property
    def is_installment_plan(self) -> bool:
        return self.recurrence_kind == INSTALLMENTS and (self.installments or 0) > 1


def _insert(session: Session, txn: Transaction) -> Transaction:
    session.add(txn)
    session.flush()
    contribution = goal_contribution(txn)
    if contribution:
        apply_goal_delta(session, *contribution)
    return txn


def schedule_transaction(
    session_factory: SessionFactory, data: ScheduledTransactionInput
) -> list[Transaction]:
    """Write the rows of a schedule atomically and return them in date order.

    Nothing is written when validation fails, and a failure while inserting
    any row rolls back every row of the plan together with its reference code.
    """

    data.validate()
    amount = signed_amount(data.amount or 0, data.type)
    description = data.description.strip()

    with session_factory() as session:
        check_links(session, user_id=data.user_id, account_id=data.account_id,
                    goal_id=data.goal_id, txn_type=data.type)
        category_id = resolve_category_id(
            session, user_id=data.user_id, transaction_type=data.type, category=data.category
        )
        base = next_reference_code(session)

        def build(**fields) -> Transaction:
            return Transaction(
                user_id=data.user_id,
                type=data.type,
                amount=amount,
                category_id=category_id,
                account_id=data.account_id,
                goal_id=data.goal_id,
                status=STATUS_PENDING,
                series_code=str(base),
                formato=FORMATO_SCHEDULE,
                situacao=data.situacao,
                creator_name=data.creator_name,
                creator_phone=data.creator_phone,
                **fields,
            )

        rows: list[Transaction] = []
        if data.is_installment_plan:
            total = int(data.installments)
            for index in range(total):
                rows.append(
                    _insert(
                        session,
                        build(
                            description=f"{description} ({index + 1}/{total})",
                            date=add_months(data.date, index),
                            recurrence=ONCE,
                            reference_code=installment_code(base, index),
                            installment_number=index + 1,
                        ),
                    )
                )
        else:
            kind = data.recurrence_kind
            rows.append(
                _insert(
                    session,
                    build(
                        description=description,
                        date=data.date,
                        recurrence=ONCE if kind == INSTALLMENTS else kind,
                        reference_code=str(base),
                    ),
                )
            )

        for row in rows:
            session.refresh(row)
        session.expunge_all()

    logger.info(
        "Schedule written",
        extra={"user_id": data.user_id, "series_code": str(base), "rows": len(rows)},
    )
    return rows


def update_scheduled(
    session_factory: SessionFactory, *, user_id: int, transaction_id: int, **changes
) -> Optional[Transaction]:
    """Edit a scheduled row; the recurrence label is normalized."""

    if "recurrence" in changes:
        changes["recurrence"] = normalize_recurrence(changes["recurrence"])
    if "situacao" in changes and changes["situacao"] not in SITUACOES:
        raise ValueError(f"Invalid situacao: {changes['situacao']}")
    with session_factory() as session:
        formato = session.exec(
            select(Transaction.formato)
            .where(Transaction.id == transaction_id)
            .where(Transaction.user_id == user_id)
        ).first()
    if formato is None:
        return None
    if formato != FORMATO_SCHEDULE:
        raise ValueError("Transaction is not scheduled")
    return update_transaction(
        session_factory, user_id=user_id, transaction_id=transaction_id, **changes
    )


def settled_status(txn_type: str) -> str:
    """Income is "recebido" once settled; everything else is "paid"."""

    return STATUS_RECEIVED if txn_type == "income" else STATUS_PAID


def _successor(session: Session, txn: Transaction) -> Optional[Transaction]:
    if txn.situacao == SITUACAO_DONE:
        return None
    next_date = next_occurrence(txn.date, txn.recurrence)
    if next_date is None:
        return None
    successor = Transaction(
        user_id=txn.user_id,
        type=txn.type,
        amount=txn.amount,
        description=txn.description,
        date=next_date,
        category_id=txn.category_id,
        account_id=txn.account_id,
        goal_id=txn.goal_id,
        recurrence=normalize_recurrence(txn.recurrence),
        status=STATUS_PENDING,
        reference_code=str(next_reference_code(session)),
        series_code=txn.series_code,
        formato=txn.formato,
        situacao=txn.situacao,
        creator_name=txn.creator_name,
        creator_phone=txn.creator_phone,
    )
    return _insert(session, successor)


def settle_transaction(
    session_factory: SessionFactory, *, user_id: int, transaction_id: int
) -> Optional[tuple[Transaction, Optional[Transaction]]]:
    """Mark a pending or overdue row as paid/received and spawn its successor.

    Returns None when the row does not exist. The status change only applies
    to open rows, so settling a row twice (or from two requests at once) is a
    no-op the second time and yields no further successor.
    """

    with session_factory() as session:
        txn = session.exec(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.user_id == user_id)
        ).first()
        if txn is None:
            return None

        result = session.execute(
            update(Transaction)
            .where(Transaction.id == transaction_id)
            .where(Transaction.status.in_(OPEN_STATUSES))  # type: ignore
            .values(status=settled_status(txn.type), updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        successor = None
        if result.rowcount:
            successor = _successor(session, txn)
            if successor is not None:
                session.refresh(successor)
        session.refresh(txn)
        session.expunge_all()

    if successor is None:
        logger.info("Transaction settled", extra={"user_id": user_id, "transaction_id": txn.id,
                                                  "status": txn.status})
    else:
        logger.info(
            "Transaction settled with successor",
            extra={"user_id": user_id, "transaction_id": txn.id, "successor_id": successor.id,
                   "successor_date": successor.date.isoformat()},
        )
    return txn, successor
