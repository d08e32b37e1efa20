"""Account (conta) model for balances and transaction linkage."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Account(SQLModel, table=True):
    __tablename__: ClassVar[str] = "tbl_contas"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="poupeja_users.id", index=True)
    name: str = Field(nullable=False, max_length=128)
    color: str = Field(default="#607D8B", max_length=7)
    icon: str = Field(default="wallet", max_length=32)
    is_default: bool = Field(default=False, nullable=False)
