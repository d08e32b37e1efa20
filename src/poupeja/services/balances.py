"""Per-account balances and transfers between accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..domain.repositories import AccountRepository, TransactionRepository
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.transaction import FORMATO_TRANSACTION, Transaction
from .categories import resolve_category_id
from .reference_codes import next_reference_code
from .transactions import check_links

logger = get_logger(__name__)

TRANSFER_CATEGORY = "Transferência"


def account_balances(
    accounts: AccountRepository, transactions: TransactionRepository, *, user_id: int
) -> list[dict[str, object]]:
    """Every visible account with the signed sum of its transactions, largest first."""

    totals = dict(transactions.balances_by_account(user_id=user_id))
    rows = [
        {
            "account_id": account.id,
            "name": account.name,
            "color": account.color,
            "icon": account.icon,
            "balance": round(totals.get(account.id, 0.0), 2),
        }
        for account in accounts.list_all(user_id=user_id)
    ]
    rows.sort(key=lambda row: row["balance"], reverse=True)
    return rows


def transfer(
    session_factory: SessionFactory,
    *,
    user_id: int,
    from_account_id: int,
    to_account_id: int,
    amount: float,
    date: datetime,
    description: Optional[str] = None,
) -> tuple[Transaction, Transaction]:
    """Move money between two accounts as a paired expense and income."""

    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise ValueError("Amount must be a number") from None
    if value <= 0:
        raise ValueError("Transfer amount must be greater than zero")
    if from_account_id == to_account_id:
        raise ValueError("Source and destination accounts must differ")
    if date is None:
        raise ValueError("Transfer date is required")
    label = (description or TRANSFER_CATEGORY).strip()

    with session_factory() as session:
        check_links(session, user_id=user_id, account_id=from_account_id)
        check_links(session, user_id=user_id, account_id=to_account_id)
        legs = []
        for txn_type, account_id, signed, suffix in (
            ("expense", from_account_id, -value, "Saída"),
            ("income", to_account_id, value, "Entrada"),
        ):
            code = str(next_reference_code(session))
            leg = Transaction(
                user_id=user_id,
                type=txn_type,
                amount=signed,
                description=f"{label} ({suffix})",
                date=date,
                category_id=resolve_category_id(
                    session, user_id=user_id, transaction_type=txn_type,
                    category=TRANSFER_CATEGORY,
                ),
                account_id=account_id,
                reference_code=code,
                series_code=code,
                formato=FORMATO_TRANSACTION,
            )
            session.add(leg)
            legs.append(leg)
        session.flush()
        for leg in legs:
            session.refresh(leg)
        session.expunge_all()

    logger.info(
        "Transfer recorded",
        extra={"user_id": user_id, "from_account": from_account_id,
               "to_account": to_account_id, "amount": value},
    )
    return legs[0], legs[1]
