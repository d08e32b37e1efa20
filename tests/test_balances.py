"""Account balances and transfers."""

from __future__ import annotations

from datetime import datetime

import pytest

from poupeja.infra.repositories import SQLModelAccountRepository, SQLModelTransactionRepository
from poupeja.services.balances import account_balances, transfer


def test_balances_sorted_by_total(session_factory, user, account_factory, transaction_factory):
    wallet = account_factory("Carteira")
    bank = account_factory("Banco")
    empty = account_factory("Poupança")
    transaction_factory(2000.0, account_id=bank.id)
    transaction_factory(-350.0, account_id=bank.id)
    transaction_factory(-20.0, account_id=wallet.id)
    transaction_factory(-999.0)  # no account

    rows = account_balances(
        SQLModelAccountRepository(session_factory),
        SQLModelTransactionRepository(session_factory),
        user_id=user.id,
    )
    assert [(r["name"], r["balance"]) for r in rows] == [
        ("Banco", 1650.0),
        ("Poupança", 0.0),
        ("Carteira", -20.0),
    ]
    assert rows[1]["account_id"] == empty.id


def test_transfer_creates_paired_legs(session_factory, user, account_factory):
    src = account_factory("Banco")
    dst = account_factory("Carteira")

    out_leg, in_leg = transfer(
        session_factory, user_id=user.id, from_account_id=src.id, to_account_id=dst.id,
        amount=150, date=datetime(2024, 4, 1),
    )

    assert (out_leg.type, out_leg.amount, out_leg.account_id) == ("expense", -150.0, src.id)
    assert (in_leg.type, in_leg.amount, in_leg.account_id) == ("income", 150.0, dst.id)
    assert out_leg.description.endswith("(Saída)")
    assert in_leg.description.endswith("(Entrada)")
    assert out_leg.reference_code != in_leg.reference_code


@pytest.mark.parametrize("amount", [0, -5, "x"])
def test_transfer_rejects_bad_amount(session_factory, user, account_factory, amount):
    src = account_factory("Banco")
    dst = account_factory("Carteira")
    with pytest.raises(ValueError):
        transfer(session_factory, user_id=user.id, from_account_id=src.id,
                 to_account_id=dst.id, amount=amount, date=datetime(2024, 4, 1))


def test_transfer_rejects_same_or_foreign_account(session_factory, user, other_user,
                                                  account_factory):
    src = account_factory("Banco")
    foreign = account_factory("Alheia", owner=other_user)
    with pytest.raises(ValueError):
        transfer(session_factory, user_id=user.id, from_account_id=src.id,
                 to_account_id=src.id, amount=10, date=datetime(2024, 4, 1))
    with pytest.raises(ValueError):
        transfer(session_factory, user_id=user.id, from_account_id=src.id,
                 to_account_id=foreign.id, amount=10, date=datetime(2024, 4, 1))
    rows = SQLModelTransactionRepository(session_factory).list_all(user_id=user.id)
    assert rows == []
