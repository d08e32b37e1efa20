"""Subscription records mirrored from the billing provider."""

from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Subscription(SQLModel, table=True):
    __tablename__: ClassVar[str] = "poupeja_subscriptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="poupeja_users.id", nullable=False, index=True)
    status: str = Field(default="inactive", nullable=False, max_length=32, index=True)
    plan_type: str = Field(default="monthly", max_length=16)
    stripe_customer_id: Optional[str] = Field(default=None, max_length=64)
    stripe_subscription_id: Optional[str] = Field(default=None, max_length=64, index=True)
    current_period_start: Optional[NaiveDatetime] = Field(
        default=None, sa_type=DateTime(timezone=False)
    )
    current_period_end: Optional[NaiveDatetime] = Field(
        default=None, sa_type=DateTime(timezone=False)
    )
    cancel_at_period_end: bool = Field(default=False, nullable=False)
