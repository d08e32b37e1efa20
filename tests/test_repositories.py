"""Repository behaviour: user scoping, shared defaults and unlinking on delete."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy import DateTime
from sqlmodel import select

from poupeja.infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCategoryRepository,
    SQLModelDependentRepository,
    SQLModelGoalRepository,
    SQLModelNoteRepository,
    SQLModelReminderRepository,
    SQLModelTransactionRepository,
)
from poupeja.models import Note, Reminder, Subscription, Transaction
from poupeja.services.accounts import create_account, update_account
from poupeja.services.categories import create_category, update_category
from poupeja.services.dependents import add_dependent, update_dependent
from poupeja.services.notes import create_note, update_note


def test_transactions_are_scoped_to_owner(session_factory, user, other_user, transaction_factory):
    mine = transaction_factory(-10.0)
    transaction_factory(-20.0, owner=other_user)
    repo = SQLModelTransactionRepository(session_factory)

    assert [t.id for t in repo.list_all(user_id=user.id)] == [mine.id]
    assert repo.get_by_id(mine.id, user_id=other_user.id) is None


def test_categories_include_shared_defaults(session_factory, user, other_user, category_factory):
    category_factory("Outros", shared=True)
    category_factory("Pets")
    category_factory("Secreta", owner=other_user)
    repo = SQLModelCategoryRepository(session_factory)

    names = {c.name for c in repo.list_all(user_id=user.id)}
    assert names == {"Outros", "Pets"}
    assert repo.get_by_name("pets", "expense", user_id=user.id) is not None
    assert repo.get_by_name("pets", "income", user_id=user.id) is None


def test_category_names_unique_per_user(session_factory, user, other_user):
    repo = SQLModelCategoryRepository(session_factory)
    create_category(repo, user_id=user.id, name="Saúde")
    with pytest.raises(ValueError):
        create_category(repo, user_id=user.id, name="saúde")
    create_category(repo, user_id=other_user.id, name="Saúde")
    with pytest.raises(ValueError):
        create_category(repo, user_id=user.id, name="X", category_type="transfer")


def test_shared_category_cannot_be_edited_or_deleted(session_factory, user, category_factory):
    shared = category_factory("Outros", shared=True)
    repo = SQLModelCategoryRepository(session_factory)
    assert update_category(repo, user_id=user.id, category_id=shared.id, name="Meu") is None
    assert repo.delete(shared.id, user_id=user.id) is False


def test_deleting_category_unlinks_transactions(session_factory, user, category_factory,
                                                 transaction_factory):
    pets = category_factory("Pets")
    txn = transaction_factory(-35.0, category_id=pets.id)
    assert SQLModelCategoryRepository(session_factory).delete(pets.id, user_id=user.id)
    refreshed = SQLModelTransactionRepository(session_factory).get_by_id(txn.id, user_id=user.id)
    assert refreshed.category_id is None


def test_accounts_unique_names_and_shared_defaults(session_factory, user, account_factory):
    account_factory("Dinheiro", shared=True)
    repo = SQLModelAccountRepository(session_factory)
    nubank = create_account(repo, user_id=user.id, name="Nubank")
    with pytest.raises(ValueError):
        create_account(repo, user_id=user.id, name="NUBANK")
    with pytest.raises(ValueError):
        create_account(repo, user_id=user.id, name=" ")

    assert [a.name for a in repo.list_all(user_id=user.id)] == ["Dinheiro", "Nubank"]
    renamed = update_account(repo, user_id=user.id, account_id=nubank.id, name="Roxinho")
    assert renamed.name == "Roxinho"


def test_deleting_goal_unlinks_transactions(session_factory, user, goal_factory,
                                            transaction_factory):
    goal = goal_factory()
    txn = transaction_factory(100.0, goal_id=goal.id)
    assert SQLModelGoalRepository(session_factory).delete(goal.id, user_id=user.id)
    refreshed = SQLModelTransactionRepository(session_factory).get_by_id(txn.id, user_id=user.id)
    assert refreshed.goal_id is None


def test_dependents_numbered_per_owner(session_factory, user, other_user):
    repo = SQLModelDependentRepository(session_factory)
    first = add_dependent(repo, user_id=user.id, name="Bia", phone="(11) 98888-7777")
    second = add_dependent(repo, user_id=user.id, name="Caio", phone="+55 11 97777-6666")
    theirs = add_dependent(repo, user_id=other_user.id, name="Duda", phone="1196666-5555")

    assert (first.dep_numero, second.dep_numero, theirs.dep_numero) == (1, 2, 1)
    assert first.dep_phone == "11988887777"
    assert [d.dep_name for d in repo.list_all(user_id=user.id)] == ["Bia", "Caio"]

    repo.delete(first.dep_id, user_id=user.id)
    third = add_dependent(repo, user_id=user.id, name="Enzo", phone="11955554444")
    assert third.dep_numero == 3

    updated = update_dependent(repo, user_id=user.id, dep_id=second.dep_id, phone="11 9000-0000")
    assert updated.dep_phone == "1190000000"
    with pytest.raises(ValueError):
        add_dependent(repo, user_id=user.id, name="Sem fone", phone="abc")


def test_notes_search_newest_first(session_factory, user):
    repo = SQLModelNoteRepository(session_factory)
    repo.create(Note(data=date(2024, 1, 1), descricao="IPVA", notas="pagar em 3x",
                     created_at=datetime(2024, 1, 1)), user_id=user.id)
    repo.create(Note(data=date(2024, 2, 1), descricao="Seguro", notas="Renovar IPVA junto",
                     created_at=datetime(2024, 2, 1)), user_id=user.id)
    repo.create(Note(data=date(2024, 3, 1), descricao="Mercado", notas="",
                     created_at=datetime(2024, 3, 1)), user_id=user.id)

    assert [n.descricao for n in repo.list_all(user_id=user.id, text="ipva")] == ["Seguro", "IPVA"]
    assert [n.descricao for n in repo.list_all(user_id=user.id)] == ["Mercado", "Seguro", "IPVA"]


def test_note_service_validation(session_factory, user):
    repo = SQLModelNoteRepository(session_factory)
    with pytest.raises(ValueError):
        create_note(repo, user_id=user.id, data=date(2024, 1, 1), descricao="")
    note = create_note(repo, user_id=user.id, data=date(2024, 1, 1), descricao="Lembrar")
    edited = update_note(repo, user_id=user.id, note_id=note.id, notas="detalhes")
    assert edited.notas == "detalhes"
    assert edited.updated_at is not None


def test_reminders_ordered_by_date(session_factory, user):
    repo = SQLModelReminderRepository(session_factory)
    repo.create(Reminder(description="B", date=datetime(2024, 5, 2)), user_id=user.id)
    repo.create(Reminder(description="A", date=datetime(2024, 5, 1), codigo_trans="9"),
                user_id=user.id)
    assert [r.description for r in repo.list_all(user_id=user.id)] == ["A", "B"]
    assert [r.description for r in repo.list_by_codigo("9", user_id=user.id)] == ["A"]


@pytest.mark.parametrize(
    "column",
    [
        Transaction.__table__.c.date,
        Reminder.__table__.c.date,
        Reminder.__table__.c.last_notification_at,
        Subscription.__table__.c.current_period_end,
    ],
    ids=lambda column: f"{column.table.name}.{column.name}",
)
def test_wall_clock_columns_are_naive(column):
    assert isinstance(column.type, DateTime)
    assert column.type.timezone is False


def test_naive_datetimes_persist_unchanged(session_factory, user):
    due = datetime(2024, 1, 31, 23, 0)
    with session_factory() as session:
        session.add(Transaction(user_id=user.id, type="expense", amount=-10.0,
                                description="Luz", date=due))
        session.add(Reminder(user_id=user.id, description="Pagar luz", date=due,
                             last_notification_at=due))
        session.add(Subscription(user_id=user.id, status="active", current_period_end=due))

    with session_factory() as session:
        stored = [
            session.exec(select(Transaction.date)).one(),
            session.exec(select(Reminder.date)).one(),
            session.exec(select(Reminder.last_notification_at)).one(),
            session.exec(select(Subscription.current_period_end)).one(),
        ]
    assert stored == [due] * 4
    assert all(value.tzinfo is None for value in stored)
