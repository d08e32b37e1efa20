"""SQLModel definitions for ledger and scheduled transactions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

TRANSACTION_TYPES = ("income", "expense", "reminder", "lembrete", "outros")
REMINDER_TYPES = ("reminder", "lembrete")

STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_RECEIVED = "recebido"
STATUS_OVERDUE = "overdue"
TRANSACTION_STATUSES = (STATUS_PENDING, STATUS_PAID, STATUS_RECEIVED, STATUS_OVERDUE)
OPEN_STATUSES = (STATUS_PENDING, STATUS_OVERDUE)

FORMATO_TRANSACTION = "transacao"
FORMATO_SCHEDULE = "agenda"
FORMATO_REMINDER = "lembrete"

SITUACAO_ACTIVE = "ativo"
SITUACAO_PENDING = "pendente"
SITUACAO_DONE = "concluido"
SITUACAO_CANCELLED = "cancelado"
SITUACOES = (SITUACAO_ACTIVE, SITUACAO_PENDING, SITUACAO_DONE, SITUACAO_CANCELLED)


class Transaction(SQLModel, table=True):
    """A single ledger row; scheduled rows carry ``formato == "agenda"``.

    Amounts are signed: income positive, expenses negative.
    """

    __tablename__: ClassVar[str] = "poupeja_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="poupeja_users.id", nullable=False, index=True)
    type: str = Field(default="expense", nullable=False, max_length=16)
    amount: float = Field(nullable=False, description="Positive for inflow, negative for outflow")
    description: str = Field(default="", max_length=255)
    # Wall-clock time in the configured zone, stored without offset.
    date: NaiveDatetime = Field(sa_type=DateTime(timezone=False), nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="poupeja_categories.id")
    account_id: Optional[int] = Field(default=None, foreign_key="tbl_contas.id", index=True)
    goal_id: Optional[int] = Field(default=None, foreign_key="poupeja_goals.id", index=True)

    recurrence: str = Field(default="once", nullable=False, max_length=16)
    status: Optional[str] = Field(default=None, max_length=16, index=True)
    reference_code: Optional[str] = Field(default=None, max_length=32, index=True)
    # Shared by every row of one installment plan or recurrence chain ("codigo-trans").
    series_code: Optional[str] = Field(default=None, max_length=32, index=True)
    installment_number: Optional[int] = Field(default=None)
    formato: str = Field(default=FORMATO_TRANSACTION, nullable=False, max_length=16, index=True)
    situacao: str = Field(default=SITUACAO_ACTIVE, nullable=False, max_length=16)

    creator_name: Optional[str] = Field(default=None, max_length=128)
    creator_phone: Optional[str] = Field(default=None, max_length=32)
    notification_sent: bool = Field(default=False, nullable=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at: Optional[datetime] = Field(default=None)

    @property
    def is_scheduled(self) -> bool:
        return self.formato == FORMATO_SCHEDULE and self.amount != 0
