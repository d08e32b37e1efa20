"""Authentication and user management services."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy import func
from sqlmodel import select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)

_hasher = PasswordHasher()
_ALLOWED_ROLES = {"user", "admin"}
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _normalize_role(role: str) -> str:
    role = (role or "user").lower()
    if role not in _ALLOWED_ROLES:
        raise ValueError(f"Invalid role: {role}")
    return role


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not _EMAIL.match(email):
        raise ValueError("Enter a valid email address")
    return email


def get_user(user_id: int, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by primary key."""
    with session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_email(email: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by email (case-insensitive)."""
    with session_factory() as session:
        user = session.exec(
            select(User).where(func.lower(User.email) == (email or "").strip().lower())
        ).first()
        if user:
            session.expunge(user)
        return user


def create_user(
    *,
    email: str,
    password: str,
    name: str = "",
    phone: Optional[str] = None,
    role: str = "user",
    session_factory: SessionFactory,
) -> User:
    """Create a new user with hashed password."""

    normalized_role = _normalize_role(role)
    email = _normalize_email(email)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")
    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing:
            raise ValueError("Email already registered")
        user = User(
            email=email,
            password_hash=password_hash,
            name=(name or "").strip(),
            phone=phone,
            role=normalized_role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(
    *,
    email: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    email = (email or "").strip().lower()
    if not email:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.warning("Login rejected", extra={"user_id": user.id})
            return None

        if _hasher.check_needs_rehash(user.password_hash):
            user.password_hash = _hasher.hash(password)
        user.last_login = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def change_password(
    *, user_id: int, current_password: str, new_password: str, session_factory: SessionFactory
) -> None:
    """Replace the password after verifying the current one."""

    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        try:
            _hasher.verify(user.password_hash, current_password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            raise ValueError("Current password is incorrect") from None
        user.password_hash = _hasher.hash(new_password)
        session.add(user)
        session.commit()


def user_to_dict(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "phone": user.phone,
        "role": user.role,
    }
