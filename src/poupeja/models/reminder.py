"""Standalone reminders (lembretes) that trigger a notification."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

REMINDER_PENDING = "pendente"
REMINDER_SENT = "lembrado"


class Reminder(SQLModel, table=True):
    __tablename__: ClassVar[str] = "tbl_lembrete"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="poupeja_users.id", nullable=False, index=True)
    name: Optional[str] = Field(default=None, max_length=128)
    description: str = Field(default="", max_length=255)
    amount: Optional[float] = Field(default=None)
    # Wall-clock time in the configured zone, stored without offset.
    date: NaiveDatetime = Field(sa_type=DateTime(timezone=False), nullable=False, index=True)
    status: str = Field(default=REMINDER_PENDING, max_length=16)
    situacao: str = Field(default="ativo", max_length=16)
    recurrence: str = Field(default="once", max_length=16)
    reference_code: Optional[str] = Field(default=None, max_length=32)
    codigo_trans: Optional[str] = Field(default=None, max_length=32, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    notification_sent: bool = Field(default=False, nullable=False)
    last_notification_at: Optional[NaiveDatetime] = Field(
        default=None, sa_type=DateTime(timezone=False)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
