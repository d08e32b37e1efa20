"""User model supporting authentication and dependents."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Application user; ``is_dependent`` marks accounts created for a dependent."""

    __tablename__: ClassVar[str] = "poupeja_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    name: str = Field(default="", max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    role: str = Field(default="user", nullable=False, max_length=16, index=True)
    is_dependent: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_login: Optional[datetime] = Field(default=None)
