"""Goal maintenance, progress and recalculation."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from poupeja.infra.repositories import SQLModelGoalRepository, SQLModelTransactionRepository
from poupeja.models import Goal
from poupeja.services.goals import (
    create_goal,
    goal_progress,
    recalculate_goal_amounts,
    update_goal,
)
from poupeja.services.transactions import (
    create_transaction,
    delete_transaction,
    update_transaction,
)


def _current(session_factory, goal_id):
    with session_factory() as session:
        return session.get(Goal, goal_id).current_amount


def _income(session_factory, user, amount, goal_id):
    return create_transaction(
        session_factory, user_id=user.id, txn_type="income", amount=amount,
        description="Aporte", date=datetime(2024, 1, 10), goal_id=goal_id,
    )


def test_goal_amount_tracks_linked_income(session_factory, user, goal_factory):
    trip = goal_factory("Viagem")
    car = goal_factory("Carro")

    first = _income(session_factory, user, 100, trip.id)
    second = _income(session_factory, user, 250, trip.id)
    assert _current(session_factory, trip.id) == pytest.approx(350.0)

    update_transaction(session_factory, user_id=user.id, transaction_id=first.id, amount=150)
    assert _current(session_factory, trip.id) == pytest.approx(400.0)

    update_transaction(session_factory, user_id=user.id, transaction_id=second.id, goal_id=car.id)
    assert _current(session_factory, trip.id) == pytest.approx(150.0)
    assert _current(session_factory, car.id) == pytest.approx(250.0)

    delete_transaction(session_factory, user_id=user.id, transaction_id=first.id)
    assert _current(session_factory, trip.id) == pytest.approx(0.0)


def test_expense_does_not_count_toward_goal(session_factory, user, goal_factory):
    goal = goal_factory()
    create_transaction(
        session_factory, user_id=user.id, txn_type="expense", amount=80,
        description="Gasto", date=datetime(2024, 1, 1), goal_id=goal.id,
    )
    assert _current(session_factory, goal.id) == 0.0


def test_recalculate_rebuilds_from_transactions(session_factory, user, goal_factory,
                                                transaction_factory):
    goal = goal_factory(current_amount=999.0)
    transaction_factory(300.0, goal_id=goal.id)
    transaction_factory(200.0, goal_id=goal.id)
    empty = goal_factory("Vazia", current_amount=50.0)

    goals = recalculate_goal_amounts(session_factory, user_id=user.id)

    assert {g.id: g.current_amount for g in goals} == {goal.id: 500.0, empty.id: 0.0}
    assert _current(session_factory, goal.id) == 500.0


def test_create_goal_validation(session_factory, user):
    repo = SQLModelGoalRepository(session_factory)
    with pytest.raises(ValueError):
        create_goal(repo, user_id=user.id, name="", target_amount=10)
    with pytest.raises(ValueError):
        create_goal(repo, user_id=user.id, name="X", target_amount=0)
    with pytest.raises(ValueError):
        create_goal(repo, user_id=user.id, name="X", target_amount=10, goal_type="savings")
    with pytest.raises(ValueError):
        create_goal(repo, user_id=user.id, name="X", target_amount=10,
                    start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

    goal = create_goal(repo, user_id=user.id, name=" Reserva ", target_amount=5000)
    assert goal.name == "Reserva"
    assert goal.current_amount == 0.0


def test_update_goal_protects_current_amount(session_factory, user, goal_factory):
    repo = SQLModelGoalRepository(session_factory)
    goal = goal_factory()
    with pytest.raises(ValueError):
        update_goal(repo, user_id=user.id, goal_id=goal.id, current_amount=10)
    updated = update_goal(repo, user_id=user.id, goal_id=goal.id, target_amount=2000)
    assert updated.target_amount == 2000
    assert update_goal(repo, user_id=user.id, goal_id=404, name="x") is None


def test_income_goal_progress(goal_factory):
    goal = goal_factory(target_amount=1000.0, current_amount=250.0)
    progress = goal_progress(goal)
    assert progress.percentage == 25.0
    assert progress.remaining == 750.0
    assert progress.level == "ok"


@pytest.mark.parametrize(
    ("spent", "level"),
    [(500.0, "ok"), (750.0, "warning"), (900.0, "danger"), (1000.0, "exceeded"), (1200.0, "exceeded")],
)
def test_limit_levels(session_factory, user, goal_factory, category_factory, transaction_factory,
                      spent, level):
    food = category_factory("Alimentação")
    limit = goal_factory(
        "Limite mercado", target_amount=1000.0, goal_type="expense", category_id=food.id,
        start_date=date(2024, 3, 1), end_date=date(2024, 3, 31),
    )
    transaction_factory(-spent, date=datetime(2024, 3, 15), category_id=food.id)
    transaction_factory(-400.0, date=datetime(2024, 4, 2), category_id=food.id)
    transaction_factory(-300.0, date=datetime(2024, 3, 20))

    progress = goal_progress(limit, SQLModelTransactionRepository(session_factory))
    assert progress.current == spent
    assert progress.level == level
