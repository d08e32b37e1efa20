"""Reminder service and the periodic sweep."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlmodel import select

from poupeja.infra.repositories import SQLModelReminderRepository
from poupeja.models import Reminder, Transaction
from poupeja.services.reminders import (
    create_reminder,
    dispatch_due,
    mark_overdue,
    run_sweep,
    update_reminder,
)

NOW = datetime(2024, 6, 10, 9, 0)


def _txn(session_factory, txn_id):
    with session_factory() as session:
        row = session.get(Transaction, txn_id)
        session.expunge(row)
    return row


def test_create_and_update_reminder(session_factory, user):
    reminder = create_reminder(
        session_factory, user_id=user.id, description="Pagar IPTU",
        date=datetime(2024, 7, 1, 10, 0), recurrence="Mensal",
    )
    assert reminder.status == "pendente"
    assert reminder.recurrence == "monthly"
    assert reminder.reference_code == reminder.codigo_trans == "10000001"

    repo = SQLModelReminderRepository(session_factory)
    moved = update_reminder(repo, user_id=user.id, reminder_id=reminder.id,
                            date=datetime(2024, 7, 2, 10, 0))
    assert moved.date == datetime(2024, 7, 2, 10, 0)
    assert update_reminder(repo, user_id=user.id, reminder_id=999, description="x") is None


def test_mark_overdue_only_touches_pending_scheduled_rows(session_factory, transaction_factory):
    late = transaction_factory(-10.0, date=NOW - timedelta(days=1), formato="agenda",
                               status="pending")
    future = transaction_factory(-10.0, date=NOW + timedelta(days=1), formato="agenda",
                                 status="pending")
    paid = transaction_factory(-10.0, date=NOW - timedelta(days=3), formato="agenda",
                               status="paid")
    ledger = transaction_factory(-10.0, date=NOW - timedelta(days=3))

    assert mark_overdue(session_factory, now=NOW) == 1
    assert _txn(session_factory, late.id).status == "overdue"
    assert _txn(session_factory, future.id).status == "pending"
    assert _txn(session_factory, paid.id).status == "paid"
    assert _txn(session_factory, ledger.id).status is None


def test_dispatch_due_within_window(session_factory, user, transaction_factory, notifier,
                                    make_notifier):
    due_txn = transaction_factory(-80.0, "Conta de luz", date=NOW + timedelta(minutes=5),
                                  formato="agenda", status="pending")
    transaction_factory(-80.0, "Mais tarde", date=NOW + timedelta(hours=2),
                        formato="agenda", status="pending")
    reminder = create_reminder(session_factory, user_id=user.id, description="Ligar banco",
                               date=NOW - timedelta(minutes=3))

    result = dispatch_due(session_factory, notifier, now=NOW)

    assert result.sent == 2
    assert {(n.kind, n.record_id) for n in notifier.sent} == {
        ("transaction", due_txn.id),
        ("reminder", reminder.id),
    }
    assert all(n.phone == user.phone for n in notifier.sent)
    assert _txn(session_factory, due_txn.id).notification_sent is True
    stored = SQLModelReminderRepository(session_factory).get_by_id(reminder.id, user_id=user.id)
    assert stored.status == "lembrado"
    assert stored.last_notification_at == NOW

    again = make_notifier()
    assert dispatch_due(session_factory, again, now=NOW).sent == 0


def test_failed_notification_is_logged_and_retried(session_factory, transaction_factory,
                                                   make_notifier, caplog):
    bad = transaction_factory(-1.0, "Falha", date=NOW, formato="agenda", status="pending")
    good = transaction_factory(-2.0, "Ok", date=NOW, formato="agenda", status="pending")
    flaky = make_notifier(fail_on={bad.id})

    with caplog.at_level(logging.ERROR, logger="poupeja"):
        result = dispatch_due(session_factory, flaky, now=NOW)

    assert (result.sent, result.failed) == (1, 1)
    assert [n.record_id for n in flaky.sent] == [good.id]
    assert "Notification failed" in caplog.text
    assert _txn(session_factory, bad.id).notification_sent is False


def test_run_sweep_dispatches_before_marking_overdue(session_factory, transaction_factory,
                                                     notifier):
    just_passed = transaction_factory(-5.0, date=NOW - timedelta(minutes=2), formato="agenda",
                                      status="pending")
    result = run_sweep(session_factory, notifier, now=NOW)
    assert result.sent == 1
    assert result.overdue == 1
    assert _txn(session_factory, just_passed.id).status == "overdue"


def test_sent_reminders_are_not_resent(session_factory, user, notifier):
    with session_factory() as session:
        session.add(Reminder(user_id=user.id, description="Já enviado", date=NOW,
                             status="lembrado"))
    assert dispatch_due(session_factory, notifier, now=NOW).sent == 0
    with session_factory() as session:
        assert session.exec(select(Reminder)).one().status == "lembrado"
