"""Goals (income targets) and limits (spending ceilings)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

GOAL_TYPES = ("income", "expense")


class Goal(SQLModel, table=True):
    """A target accumulation (type=income) or a spending limit (type=expense).

    ``current_amount`` of an income goal always equals the sum of the amounts of
    the income transactions linked to it.
    """

    __tablename__: ClassVar[str] = "poupeja_goals"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="poupeja_users.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    target_amount: float = Field(nullable=False)
    current_amount: float = Field(default=0.0, nullable=False)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    deadline: Optional[date] = Field(default=None)
    color: str = Field(default="#3B82F6", max_length=7)
    category_id: Optional[int] = Field(default=None, foreign_key="poupeja_categories.id")
    account_id: Optional[int] = Field(default=None, foreign_key="tbl_contas.id")
    type: str = Field(default="income", nullable=False, max_length=16)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at: Optional[datetime] = Field(default=None)
