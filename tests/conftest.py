"""Pytest configuration and shared fixtures for Poupeja tests.

This module provides database fixtures, test data factories, and an API client
for testing domain logic, repositories, and services without touching the real
app database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from poupeja.infra.database import create_session_factory, init_database
from poupeja.models import Account, Category, Goal, Transaction, User
from poupeja.services.notifications import Notification
from sqlmodel import create_engine

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory whose sessions commit on clean exit and roll back on error."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


def _persist(session_factory, obj):
    with session_factory() as session:
        session.add(obj)
        session.flush()
        session.refresh(obj)
        session.expunge(obj)
    return obj


@pytest.fixture
def user_factory(session_factory):
    """Factory for creating users with a placeholder password hash."""

    counter = {"n": 0}

    def _create_user(email: str | None = None, phone: str | None = "5511999990000") -> User:
        counter["n"] += 1
        return _persist(
            session_factory,
            User(
                email=email or f"user{counter['n']}@example.com",
                password_hash="dummy-hash",
                name=f"User {counter['n']}",
                phone=phone,
            ),
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory("tester@example.com")


@pytest.fixture
def other_user(user_factory) -> User:
    return user_factory("other@example.com")


@pytest.fixture
def category_factory(session_factory, user):
    """Factory for creating test categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create_category(
        name: str = "Moradia",
        category_type: str = "expense",
        color: str = "#FF5733",
        owner: User | None = None,
        shared: bool = False,
    ) -> Category:
        owner = owner or user
        return _persist(
            session_factory,
            Category(
                user_id=None if shared else owner.id,
                name=name,
                type=category_type,
                color=color,
            ),
        )

    return _create_category


@pytest.fixture
def account_factory(session_factory, user):
    """Factory for creating test accounts (contas)."""

    def _create_account(name: str = "Carteira", owner: User | None = None,
                        shared: bool = False) -> Account:
        owner = owner or user
        return _persist(
            session_factory, Account(name=name, user_id=None if shared else owner.id)
        )

    return _create_account


@pytest.fixture
def goal_factory(session_factory, user):
    """Factory for creating goals and limits."""

    def _create_goal(
        name: str = "Viagem",
        target_amount: float = 1000.0,
        goal_type: str = "income",
        owner: User | None = None,
        **fields,
    ) -> Goal:
        owner = owner or user
        return _persist(
            session_factory,
            Goal(user_id=owner.id, name=name, target_amount=target_amount, type=goal_type,
                 **fields),
        )

    return _create_goal


@pytest.fixture
def transaction_factory(session_factory, user):
    """Factory for inserting transactions directly, bypassing the services.

    Amount is stored as given (positive for income, negative for expense).
    """

    def _create_transaction(
        amount: float,
        description: str = "Test transaction",
        date: datetime | None = None,
        txn_type: str | None = None,
        owner: User | None = None,
        **fields,
    ) -> Transaction:
        owner = owner or user
        return _persist(
            session_factory,
            Transaction(
                user_id=owner.id,
                type=txn_type or ("income" if amount >= 0 else "expense"),
                amount=amount,
                description=description,
                date=date or datetime.now(),
                **fields,
            ),
        )

    return _create_transaction


# =============================================================================
# Notifier doubles
# =============================================================================


class RecordingNotifier:
    """Collects notifications instead of delivering them."""

    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.sent: list[Notification] = []
        self.fail_on = fail_on or set()

    def send(self, notification: Notification) -> None:
        if notification.record_id in self.fail_on:
            raise RuntimeError("delivery failed")
        self.sent.append(notification)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_notifier():
    """Build extra recording notifiers, optionally failing for some record ids."""

    return RecordingNotifier


# =============================================================================
# Flask App Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch, notifier):
    """Flask app backed by a throwaway SQLite file, configured via environment."""

    db_path = tmp_path / "poupeja.db"
    monkeypatch.setenv("POUPEJA_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("POUPEJA_DATABASE_URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("POUPEJA_SECRET_KEY", "test-secret")
    monkeypatch.setenv("POUPEJA_TIMEZONE", "America/Sao_Paulo")
    monkeypatch.delenv("POUPEJA_REQUIRE_SUBSCRIPTION", raising=False)

    from poupeja import create_app

    app = create_app("testing", notifier=notifier)
    yield app
    app.extensions["poupeja"].engine.dispose()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def auth_client(client):
    """Test client logged in as a freshly registered user."""

    response = client.post(
        "/api/auth/register",
        json={"email": "ana@example.com", "password": "s3cret-pass", "name": "Ana"},
    )
    assert response.status_code == 201
    client.user_id = response.get_json()["id"]
    return client
