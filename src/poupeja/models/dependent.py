"""Dependents registered under an owning user."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Dependent(SQLModel, table=True):
    __tablename__: ClassVar[str] = "tbl_depentes"

    dep_id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="poupeja_users.id", nullable=False, index=True)
    dep_name: str = Field(nullable=False, max_length=128)
    dep_phone: str = Field(default="", max_length=32)
    dep_numero: int = Field(nullable=False)
