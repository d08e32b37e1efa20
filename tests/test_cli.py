"""Flask CLI commands."""

from __future__ import annotations

from datetime import datetime

from poupeja.extensions import EXTENSION_KEY
from poupeja.models import Goal, Transaction, User


def _seed(app):
    ctx = app.extensions[EXTENSION_KEY]
    with ctx.session_factory() as session:
        user = User(email="cli@example.com", password_hash="x", phone="5511")
        session.add(user)
        session.flush()
        goal = Goal(user_id=user.id, name="Reserva", target_amount=100, current_amount=7)
        session.add(goal)
        session.flush()
        session.add(Transaction(user_id=user.id, type="income", amount=40.0, description="a",
                                date=datetime(2024, 1, 1), goal_id=goal.id))
        session.add(Transaction(user_id=user.id, type="expense", amount=-15.0,
                                description="Boleto", date=datetime(2024, 6, 10, 9, 5),
                                formato="agenda", status="pending"))
        session.add(Transaction(user_id=user.id, type="expense", amount=-15.0,
                                description="Antigo", date=datetime(2024, 6, 1),
                                formato="agenda", status="pending"))
        return goal.id


def test_sweep_command(app, notifier):
    _seed(app)
    result = app.test_cli_runner().invoke(args=["poupeja-sweep", "--now", "2024-06-10T09:00:00"])
    assert result.exit_code == 0, result.output
    assert "Sent 1 notification(s), 0 failed, 1 marked overdue." in result.output
    assert [n.title for n in notifier.sent] == ["Boleto"]


def test_sweep_rejects_bad_time(app):
    result = app.test_cli_runner().invoke(args=["poupeja-sweep", "--now", "yesterday"])
    assert result.exit_code != 0


def test_recalculate_goals_command(app):
    goal_id = _seed(app)
    result = app.test_cli_runner().invoke(args=["poupeja-recalculate-goals"])
    assert result.exit_code == 0, result.output
    assert "Recalculated 1 goal(s) for 1 user(s)." in result.output
    with app.extensions[EXTENSION_KEY].session_factory() as session:
        assert session.get(Goal, goal_id).current_amount == 40.0
