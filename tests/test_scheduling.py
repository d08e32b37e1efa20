"""Scheduled transaction writer and settlement behaviour."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlmodel import select

from poupeja.infra.repositories import SQLModelTransactionRepository
from poupeja.models import Category, Goal, Transaction
from poupeja.services.scheduling import (
    ScheduledTransactionInput,
    schedule_transaction,
    settle_transaction,
    update_scheduled,
)


def _input(user, **overrides) -> ScheduledTransactionInput:
    defaults = dict(
        user_id=user.id,
        description="Rent",
        amount=100.0,
        type="expense",
        date=datetime(2024, 1, 31, 8, 0),
        recurrence="monthly",
    )
    defaults.update(overrides)
    return ScheduledTransactionInput(**defaults)


def _all_rows(session_factory, user_id):
    with session_factory() as session:
        rows = list(
            session.exec(
                select(Transaction).where(Transaction.user_id == user_id).order_by(Transaction.id)
            ).all()
        )
        session.expunge_all()
    return rows


def test_single_schedule_row(session_factory, user):
    [row] = schedule_transaction(session_factory, _input(user))

    assert row.amount == -100.0
    assert row.status == "pending"
    assert row.formato == "agenda"
    assert row.situacao == "ativo"
    assert row.recurrence == "monthly"
    assert row.reference_code == "10000001"
    assert row.series_code == "10000001"


def test_portuguese_recurrence_label_is_normalized(session_factory, user):
    [row] = schedule_transaction(session_factory, _input(user, recurrence="Semanal"))
    assert row.recurrence == "weekly"


def test_installments_expand_monthly_with_letter_codes(session_factory, user):
    rows = schedule_transaction(
        session_factory,
        _input(user, description="TV", amount=300, recurrence="installments", installments=3),
    )

    assert [r.date for r in rows] == [
        datetime(2024, 1, 31, 8, 0),
        datetime(2024, 2, 29, 8, 0),
        datetime(2024, 3, 31, 8, 0),
    ]
    assert [r.reference_code for r in rows] == ["10000001A", "10000001B", "10000001C"]
    assert {r.series_code for r in rows} == {"10000001"}
    assert [r.description for r in rows] == ["TV (1/3)", "TV (2/3)", "TV (3/3)"]
    assert [r.installment_number for r in rows] == [1, 2, 3]
    assert all(r.recurrence == "once" for r in rows)
    assert all(r.status == "pending" and r.formato == "agenda" for r in rows)


def test_single_installment_is_a_plain_row(session_factory, user):
    [row] = schedule_transaction(
        session_factory, _input(user, recurrence="installments", installments=1)
    )
    assert row.reference_code == "10000001"
    assert row.recurrence == "once"


def test_category_resolution_by_name_then_fallback(session_factory, user, category_factory):
    housing = category_factory("Moradia", "expense")

    [by_name] = schedule_transaction(session_factory, _input(user, category="moradia"))
    [by_id] = schedule_transaction(session_factory, _input(user, category=housing.id))
    [fallback] = schedule_transaction(session_factory, _input(user, category="Nope"))

    assert by_name.category_id == housing.id
    assert by_id.category_id == housing.id
    with session_factory() as session:
        other = session.get(Category, fallback.category_id)
        assert other.name == "Outros"
        assert other.type == "expense"


def test_other_users_category_id_is_not_used(session_factory, user, other_user, category_factory):
    foreign = category_factory("Privada", "expense", owner=other_user)
    [row] = schedule_transaction(session_factory, _input(user, category=foreign.id))
    assert row.category_id != foreign.id


def test_reminder_may_stay_uncategorized(session_factory, user):
    [row] = schedule_transaction(
        session_factory, _input(user, type="lembrete", amount=None, recurrence="once")
    )
    assert row.category_id is None
    assert row.amount == 0


def test_validation_failure_writes_nothing(session_factory, user):
    with pytest.raises(ValueError):
        schedule_transaction(session_factory, _input(user, type="bogus"))
    with pytest.raises(ValueError):
        schedule_transaction(session_factory, _input(user, description="  "))
    with pytest.raises(ValueError, match="different from zero"):
        schedule_transaction(session_factory, _input(user, amount=0))
    with pytest.raises(ValueError, match="different from zero"):
        schedule_transaction(
            session_factory, _input(user, type="income", amount=0.0, recurrence="installments",
                                    installments=3),
        )
    assert _all_rows(session_factory, user.id) == []


def test_unknown_goal_rolls_back_whole_plan(session_factory, user):
    with pytest.raises(ValueError):
        schedule_transaction(
            session_factory,
            _input(user, recurrence="installments", installments=4, goal_id=999),
        )
    assert _all_rows(session_factory, user.id) == []
    # The reference code taken by the failed plan is released as well.
    [row] = schedule_transaction(session_factory, _input(user))
    assert row.reference_code == "10000001"


def test_settle_monthly_rent_creates_clamped_successor(session_factory, user):
    [rent] = schedule_transaction(session_factory, _input(user))

    settled, successor = settle_transaction(
        session_factory, user_id=user.id, transaction_id=rent.id
    )

    assert settled.status == "paid"
    assert successor is not None
    assert successor.date == datetime(2024, 2, 29, 8, 0)
    assert successor.amount == -100.0
    assert successor.description == "Rent"
    assert successor.status == "pending"
    assert successor.recurrence == "monthly"
    assert successor.series_code == rent.series_code
    assert successor.reference_code != rent.reference_code
    assert successor.formato == "agenda"


def test_settle_income_marks_received(session_factory, user):
    [salary] = schedule_transaction(
        session_factory, _input(user, type="income", description="Salário", amount=5000)
    )
    settled, successor = settle_transaction(
        session_factory, user_id=user.id, transaction_id=salary.id
    )
    assert settled.status == "recebido"
    assert successor.amount == 5000.0


def test_settle_once_has_no_successor(session_factory, user):
    [row] = schedule_transaction(session_factory, _input(user, recurrence="once"))
    settled, successor = settle_transaction(session_factory, user_id=user.id, transaction_id=row.id)
    assert settled.status == "paid"
    assert successor is None
    assert len(_all_rows(session_factory, user.id)) == 1


def test_concluded_series_does_not_advance(session_factory, user):
    [row] = schedule_transaction(session_factory, _input(user, situacao="concluido"))
    _, successor = settle_transaction(session_factory, user_id=user.id, transaction_id=row.id)
    assert successor is None


def test_settling_twice_creates_one_successor(session_factory, user):
    [row] = schedule_transaction(session_factory, _input(user, recurrence="daily"))

    first = settle_transaction(session_factory, user_id=user.id, transaction_id=row.id)
    second = settle_transaction(session_factory, user_id=user.id, transaction_id=row.id)

    assert first[1] is not None
    assert second[1] is None
    assert second[0].status == "paid"
    assert len(_all_rows(session_factory, user.id)) == 2


def test_overdue_rows_can_be_settled(session_factory, user, transaction_factory):
    row = transaction_factory(
        -50.0, "Internet", date=datetime(2024, 5, 10), formato="agenda", status="overdue",
        recurrence="monthly", series_code="42", reference_code="42",
    )
    settled, successor = settle_transaction(session_factory, user_id=user.id, transaction_id=row.id)
    assert settled.status == "paid"
    assert successor.date == datetime(2024, 6, 10)
    assert successor.series_code == "42"


def test_settle_missing_or_foreign_row(session_factory, user, other_user):
    [row] = schedule_transaction(session_factory, _input(user))
    assert settle_transaction(session_factory, user_id=user.id, transaction_id=9999) is None
    assert settle_transaction(session_factory, user_id=other_user.id, transaction_id=row.id) is None


def test_successor_credits_linked_goal(session_factory, user, goal_factory):
    goal = goal_factory("Reserva")
    [row] = schedule_transaction(
        session_factory,
        _input(user, type="income", description="Aporte", amount=200, goal_id=goal.id),
    )
    settle_transaction(session_factory, user_id=user.id, transaction_id=row.id)
    with session_factory() as session:
        assert session.get(Goal, goal.id).current_amount == pytest.approx(400.0)


def test_series_listing_and_update(session_factory, user):
    rows = schedule_transaction(
        session_factory, _input(user, recurrence="installments", installments=2)
    )
    repo = SQLModelTransactionRepository(session_factory)
    assert [r.id for r in repo.list_series("10000001", user_id=user.id)] == [r.id for r in rows]

    updated = update_scheduled(
        session_factory, user_id=user.id, transaction_id=rows[0].id,
        amount=120, recurrence="Anual",
    )
    assert updated.amount == -120.0
    assert updated.recurrence == "yearly"
    assert updated.formato == "agenda"


def test_update_scheduled_rejects_ledger_rows(session_factory, user, transaction_factory):
    row = transaction_factory(-10.0)
    with pytest.raises(ValueError):
        update_scheduled(session_factory, user_id=user.id, transaction_id=row.id, amount=5)
