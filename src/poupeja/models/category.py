"""Ledger category definitions."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

FALLBACK_CATEGORY_NAME = "Outros"


class Category(SQLModel, table=True):
    """Transaction category; ``user_id`` is None for shared defaults."""

    __tablename__: ClassVar[str] = "poupeja_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="poupeja_users.id", index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    type: str = Field(default="expense", nullable=False, max_length=16)
    icon: str = Field(default="circle", max_length=32)
    color: str = Field(default="#607D8B", max_length=7)
    is_default: bool = Field(default=False, nullable=False)
